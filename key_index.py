import logging
from collections import defaultdict

import numpy as np

from veb import VEB

logger = logging.getLogger(__name__)


class KeyIndex(object):
    """
    An index from integer keys to the items filed under them. The keys are
    kept in a veb tree so that neighboring keys can be walked in O(log log u)
    per step.
    Attributes:
        vebtree (VEB): The set of keys that currently hold at least one item
        meta (dict): Key -> list of items filed under that key
    """

    def __init__(self, universe_size):
        """
        The initializer for KeyIndex
        Input:
            universe_size (int): Exclusive upper bound on the keys, rounded up
            to the next power of two
        Output: None
        """
        self.vebtree = VEB(universe_size)
        self.meta = defaultdict(list)

    @classmethod
    def from_keys(cls, keys, universe_size=None):
        """
        Build an index where every key is filed with its position in keys
        Input:
            keys (iterable of int): The keys in input order
            universe_size (int): Upper bound on the keys, defaults to max(keys) + 1
        Output:
            index (KeyIndex): The populated index
        """
        keys = np.asarray(list(keys), dtype=np.int64)
        if universe_size is None:
            universe_size = int(keys.max()) + 1 if len(keys) else 1
        index = cls(universe_size)
        for position, key in enumerate(keys):
            index.add(int(key), position)
        logger.debug("Built key index with %d keys from %d items",
                     len(index), len(keys))
        return index

    @property
    def universe_size(self):
        return self.vebtree.universe_size

    def add(self, key, item):
        self.vebtree.insert(key)
        self.meta[key].append(item)

    def remove(self, key, item=None):
        """
        Remove item from key, or every item of key when item is None.
        The key leaves the tree once nothing is filed under it.
        Input:
            key (int): The key to remove from
            item (object): The item to remove
        Output:
            removed (int): The number of items removed
        """
        if not self.vebtree.contains(key):
            return 0
        bucket = self.meta[key]
        if item is None:
            removed = len(bucket)
            bucket.clear()
        elif item in bucket:
            bucket.remove(item)
            removed = 1
        else:
            removed = 0
        if len(bucket) == 0:
            del self.meta[key]
            self.vebtree.delete(key)
        return removed

    def items(self, key):
        if key not in self.vebtree:
            return []
        return list(self.meta[key])

    def search(self, query_key, pre_step=10, succ_step=10, max_dist=None):
        """
        Backward and forward search around the query key
        Input:
            query_key (int): The key to search around
            pre_step (int): The number of keys to visit in the backward search
            succ_step (int): The number of keys to visit in the forward search
            max_dist (int): Stop walking once a key is farther than this from
            the query, None for no limit
        Output:
            res (list): The list of dictionaries, sorted by distance, mainly composed of
            (query key,
             the key the item is filed under,
             the distance between the query and that key,
             the item)
        """
        res = []
        if self.vebtree.contains(query_key):
            for item in self.meta[query_key]:
                res.append((query_key, query_key, 0, item))

        # Backward search
        pre_prev = query_key
        p_count = 0
        while p_count < pre_step:
            pre = self.vebtree.predecessor(pre_prev)
            if pre is None:
                break
            dist = query_key - pre
            if max_dist is not None and dist > max_dist:
                break
            for item in self.meta[pre]:
                res.append((query_key, pre, dist, item))
            p_count += 1
            pre_prev = pre

        # Forward search
        succ_prev = query_key
        s_count = 0
        while s_count < succ_step:
            succ = self.vebtree.successor(succ_prev)
            if succ is None:
                break
            dist = succ - query_key
            if max_dist is not None and dist > max_dist:
                break
            for item in self.meta[succ]:
                res.append((query_key, succ, dist, item))
            s_count += 1
            succ_prev = succ
        return self.postprocessing(res)

    def postprocessing(self, res_tmp):
        """
        Sorting the result based on the distance and converting it into dictionary
        Input:
            res_tmp (list): List of tuples from search
        Output:
            res_srt_dict (list): Sorted results as dictionaries
        """
        attribute_list = ['query', 'index', 'distance', 'item']
        res_srt = sorted(res_tmp, key=lambda x: (x[2], x[1]))
        res_srt_dict = [dict(zip(attribute_list, res)) for res in res_srt]
        return res_srt_dict

    def range(self, lo, hi):
        """
        Keys in [lo, hi] in ascending order
        """
        lo = max(lo, 0)
        hi = min(hi, self.universe_size - 1)
        keys = []
        if lo > hi:
            return keys
        key = lo if lo in self.vebtree else self.vebtree.successor(lo)
        while key is not None and key <= hi:
            keys.append(key)
            key = self.vebtree.successor(key)
        return keys

    def nearest(self, key):
        """
        The stored key closest to key, the smaller one on a tie
        """
        if key in self.vebtree:
            return key
        pre = self.vebtree.predecessor(key)
        succ = self.vebtree.successor(key)
        if pre is None:
            return succ
        if succ is None:
            return pre
        return pre if key - pre <= succ - key else succ

    def __len__(self):
        return len(self.vebtree)

    def __str__(self):
        return "Key index over [0, {}) with {} keys"\
               .format(self.universe_size, len(self.vebtree))
