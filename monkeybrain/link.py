import numpy as np


class LinkArena:
    """
    Storage for every link of a network, addressed by link index.

    Each link is a weighted edge from a source neuron to a target neuron.
    Links are kept as parallel arrays so the two neurons a link joins can
    both refer to it by index without holding it themselves.

    Attributes:
        weights: Link weights (float64)
        punish_back: Per-link blame flags, only set during a backward sweep
        sources: Index of the neuron each link starts from
        targets: Index of the neuron each link feeds into
    """

    def __init__(self, capacity: int):
        """
        Initialize an empty arena.

        Args:
            capacity: Number of links the arena can hold
        """
        self.capacity = capacity
        self.weights = np.zeros(capacity, dtype=np.float64)
        self.punish_back = np.zeros(capacity, dtype=bool)
        self.sources = np.zeros(capacity, dtype=np.intp)
        self.targets = np.zeros(capacity, dtype=np.intp)
        self._count = 0

    def add(self, source: int, target: int, weight: float) -> int:
        """
        Register a link and return its index.

        Args:
            source: Index of the neuron the link starts from
            target: Index of the neuron the link feeds into
            weight: Initial weight

        Returns:
            Index of the new link
        """
        if self._count >= self.capacity:
            raise IndexError(f"link arena is full ({self.capacity} links)")

        index = self._count
        self.weights[index] = weight
        self.punish_back[index] = False
        self.sources[index] = source
        self.targets[index] = target
        self._count += 1
        return index

    def clear_punish_flags(self):
        self.punish_back[:self._count] = False

    def __len__(self):
        return self._count

    def __getitem__(self, index: int) -> 'Link':
        if not -self._count <= index < self._count:
            raise IndexError(f"link index {index} out of range")
        return Link(self, index % self._count)

    def __iter__(self):
        for index in range(self._count):
            yield Link(self, index)

    def __repr__(self):
        return f"LinkArena(links={self._count}, capacity={self.capacity})"


class Link:
    """View of a single link stored in a LinkArena."""

    __slots__ = ('arena', 'index')

    def __init__(self, arena: LinkArena, index: int):
        self.arena = arena
        self.index = index

    @property
    def weight(self) -> float:
        return float(self.arena.weights[self.index])

    @weight.setter
    def weight(self, value: float):
        self.arena.weights[self.index] = value

    @property
    def punish_back(self) -> bool:
        return bool(self.arena.punish_back[self.index])

    @punish_back.setter
    def punish_back(self, value: bool):
        self.arena.punish_back[self.index] = value

    @property
    def source(self) -> int:
        return int(self.arena.sources[self.index])

    @property
    def target(self) -> int:
        return int(self.arena.targets[self.index])

    def __eq__(self, other):
        if not isinstance(other, Link):
            return NotImplemented
        return self.arena is other.arena and self.index == other.index

    def __hash__(self):
        return hash((id(self.arena), self.index))

    def __repr__(self):
        flag = ", punish_back" if self.punish_back else ""
        return f"Link({self.source} -> {self.target}, weight={self.weight:+.3f}{flag})"
