from typing import Dict


class LearningConfig:
    """Constants of the activation and punish rules."""

    def __init__(self,
                 neuron_sensitivity: float = 0.5,
                 punish_back_percent: float = 0.8,
                 weight_increase_rate: float = 0.02,
                 weight_decrease_rate: float = 0.02,
                 weight_init_low: float = -1.0,
                 weight_init_high: float = 1.0):
        """
        Initialize learning configuration.

        Args:
            neuron_sensitivity: Activation a neuron must reach to switch on
            punish_back_percent: Share of implicated forward weight above which
                a neuron passes blame to its inputs
            weight_increase_rate: Nudge applied when a link should have pushed harder
            weight_decrease_rate: Nudge applied when a link pushed too hard
            weight_init_low: Lower bound of the initial weight distribution
            weight_init_high: Upper bound of the initial weight distribution
        """
        if weight_increase_rate <= 0 or weight_decrease_rate <= 0:
            raise ValueError("weight rates must be positive")
        if weight_init_low > weight_init_high:
            raise ValueError(
                f"weight_init_low ({weight_init_low}) is above weight_init_high ({weight_init_high})"
            )

        self.neuron_sensitivity = neuron_sensitivity
        self.punish_back_percent = punish_back_percent
        self.weight_increase_rate = weight_increase_rate
        self.weight_decrease_rate = weight_decrease_rate
        self.weight_init_low = weight_init_low
        self.weight_init_high = weight_init_high

    def to_dict(self) -> Dict[str, float]:
        return {
            'neuron_sensitivity': self.neuron_sensitivity,
            'punish_back_percent': self.punish_back_percent,
            'weight_increase_rate': self.weight_increase_rate,
            'weight_decrease_rate': self.weight_decrease_rate,
            'weight_init_low': self.weight_init_low,
            'weight_init_high': self.weight_init_high,
        }

    def __repr__(self):
        fields = ", ".join(f"{key}={value}" for key, value in self.to_dict().items())
        return f"LearningConfig({fields})"


# Global default configuration
_default_config = None


def get_default_config() -> LearningConfig:
    """
    Get or create the global learning configuration.

    Returns:
        LearningConfig instance shared by networks built without one
    """
    global _default_config
    if _default_config is None:
        _default_config = LearningConfig()
    return _default_config
