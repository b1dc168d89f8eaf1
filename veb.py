"""
van Emde Boas tree over the integer universe [0, u).

Each node keeps its minimum outside of the recursive structure, so every
operation recurses into at most one child and runs in O(log log u).
"""
import logging
import operator

import numpy as np

logger = logging.getLogger(__name__)


class VEBError(Exception):
    pass


class InvalidUniverseSize(VEBError, ValueError):
    def __init__(self, universe_size):
        super(InvalidUniverseSize, self).__init__(
            "Universe size must be greater than 0 --- u = " + str(universe_size))
        self.universe_size = universe_size


class KeyOutOfRange(VEBError, ValueError):
    def __init__(self, key, universe_size):
        super(KeyOutOfRange, self).__init__(
            "Key {} out of range [0, {})".format(key, universe_size))
        self.key = key
        self.universe_size = universe_size


def next_power_of_two(n):
    """
    Smallest power of two that is greater than or equal to n (n >= 1)
    """
    return 1 << (n - 1).bit_length()


class VEB(object):
    __slots__ = ("universe_size", "size", "base_case", "sqrt_size",
                 "num_clusters", "summary", "clusters", "_min", "_max")

    def __init__(self, universe_size):
        requested = operator.index(universe_size)
        if requested <= 0:
            raise InvalidUniverseSize(requested)
        self.universe_size = next_power_of_two(requested)
        if self.universe_size != requested:
            logger.warning("Universe size %d rounded up to next power of 2: %d",
                           requested, self.universe_size)

        self.size = 0
        self._min = None
        self._max = None
        self.base_case = self.universe_size <= 2
        self.summary = None
        if self.base_case:
            self.sqrt_size = None
            self.num_clusters = None
            self.clusters = None
        else:
            self.sqrt_size = 1 << ((self.universe_size.bit_length() - 1) // 2)
            self.num_clusters = self.universe_size // self.sqrt_size
            # cluster index -> VEB, a missing index is an empty cluster
            self.clusters = {}

    def high(self, x):
        return x // self.sqrt_size

    def low(self, x):
        return x % self.sqrt_size

    def index(self, x, y):
        return x * self.sqrt_size + y

    def _check_key(self, key):
        key = operator.index(key)
        if key < 0 or key >= self.universe_size:
            raise KeyOutOfRange(key, self.universe_size)
        return key

    # Public operations

    def insert(self, key):
        """
        Add key to the set. Returns False when it was already present.
        """
        key = self._check_key(key)
        if self._contains(key):
            return False
        self._insert(key)
        return True

    def update(self, keys):
        """
        Insert every key of an iterable and return how many were new.
        All keys are validated before the set is touched.
        """
        keys = [self._check_key(key) for key in keys]
        inserted = 0
        for key in keys:
            if not self._contains(key):
                self._insert(key)
                inserted += 1
        return inserted

    def delete(self, key):
        """
        Remove key from the set. Returns False when it was not present.
        """
        key = self._check_key(key)
        if not self._contains(key):
            return False
        self._delete(key)
        return True

    def contains(self, key):
        return self._contains(self._check_key(key))

    member = contains

    def min(self):
        return self._min

    def max(self):
        return self._max

    def successor(self, key):
        """
        Smallest stored key strictly greater than key, or None
        """
        return self._successor(self._check_key(key))

    def predecessor(self, key):
        """
        Largest stored key strictly smaller than key, or None
        """
        return self._predecessor(self._check_key(key))

    def is_empty(self):
        return self.size == 0

    def clear(self):
        self.size = 0
        self._min = None
        self._max = None
        self.summary = None
        if not self.base_case:
            self.clusters = {}
        return self

    def to_list(self):
        return list(self)

    def to_array(self):
        if self.universe_size > 1 << 63:
            return np.array(self.to_list(), dtype=object)
        return np.fromiter(self, dtype=np.int64, count=self.size)

    def __iter__(self):
        current = self._min
        if current is None:
            return
        while True:
            yield current
            if current == self._max:
                return
            current = self._successor(current)

    def __len__(self):
        return self.size

    def __contains__(self, key):
        try:
            key = operator.index(key)
        except TypeError:
            return False
        if key < 0 or key >= self.universe_size:
            return False
        return self._contains(key)

    def __repr__(self):
        return "VEB(universe_size={}, size={}, min={}, max={})".format(
            self.universe_size, self.size, self._min, self._max)

    # Recursive internals, keys are already validated for this node

    def _empty_insert(self, x):
        self._min = x
        self._max = x
        self.size = 1

    def _contains(self, x):
        if x == self._min or x == self._max:
            return True
        elif self.base_case:
            return False
        cluster = self.clusters.get(self.high(x))
        return cluster is not None and cluster._contains(self.low(x))

    def _insert(self, x):
        # x is known to be absent
        if self._min is None:
            self._empty_insert(x)
            return
        if self.base_case:
            if x < self._min:
                self._min = x
            if x > self._max:
                self._max = x
            self.size += 1
            return

        if x < self._min:
            # the new key becomes min, the old min goes down into a cluster
            x, self._min = self._min, x
        if x > self._max:
            self._max = x

        h = self.high(x)
        l = self.low(x)
        cluster = self.clusters.get(h)
        if cluster is None:
            cluster = VEB(self.sqrt_size)
            self.clusters[h] = cluster
        if cluster._min is None:
            if self.summary is None:
                self.summary = VEB(self.num_clusters)
            self.summary._insert(h)
            cluster._empty_insert(l)
        else:
            cluster._insert(l)
        self.size += 1

    def _delete(self, x):
        # x is known to be present
        if self.size == 1:
            self._min = None
            self._max = None
            self.size = 0
            return
        if self.base_case:
            if x == self._min:
                self._min = self._max
            else:
                self._max = self._min
            self.size -= 1
            return

        if x == self._min:
            # pull the smallest clustered key up to become the new min
            first_cluster = self.summary._min
            x = self.index(first_cluster, self.clusters[first_cluster]._min)
            self._min = x

        h = self.high(x)
        cluster = self.clusters[h]
        cluster._delete(self.low(x))
        if cluster._min is None:
            self.summary._delete(h)
            del self.clusters[h]
            if x == self._max:
                summary_max = self.summary._max
                if summary_max is None:
                    self._max = self._min
                else:
                    self._max = self.index(summary_max,
                                           self.clusters[summary_max]._max)
        elif x == self._max:
            self._max = self.index(h, cluster._max)
        self.size -= 1

    def _successor(self, x):
        if self._min is None:
            return None
        if self.base_case:
            if x < self._min:
                return self._min
            elif x < self._max:
                return self._max
            return None
        if x < self._min:
            return self._min

        h = self.high(x)
        l = self.low(x)
        cluster = self.clusters.get(h)
        if cluster is not None and l < cluster._max:
            return self.index(h, cluster._successor(l))
        if self.summary is None:
            return None
        succ_cluster = self.summary._successor(h)
        if succ_cluster is None:
            return None
        return self.index(succ_cluster, self.clusters[succ_cluster]._min)

    def _predecessor(self, x):
        if self._max is None:
            return None
        if self.base_case:
            if x > self._max:
                return self._max
            elif x > self._min:
                return self._min
            return None
        if x > self._max:
            return self._max

        h = self.high(x)
        l = self.low(x)
        cluster = self.clusters.get(h)
        if cluster is not None and l > cluster._min:
            return self.index(h, cluster._predecessor(l))
        pred_cluster = None
        if self.summary is not None:
            pred_cluster = self.summary._predecessor(h)
        if pred_cluster is None:
            # min lives outside the clusters
            if x > self._min:
                return self._min
            return None
        return self.index(pred_cluster, self.clusters[pred_cluster]._max)


Node = VEB
