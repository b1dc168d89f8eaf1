import argparse
import bisect
import time
import numpy as np
from veb import VEB
from tqdm import tqdm


def generate_keys(count, universe, seed=0):
    """
    Generates count distinct random keys drawn from [0, universe)
    """
    print("Generating {} unique numbers in a universe of {}...".format(count, universe))
    rng = np.random.default_rng(seed)
    return rng.choice(universe, size=count, replace=False).astype(np.int64)


class SortedListSet(object):
    """
    Baseline ordered set: a sorted python list searched with bisect
    """

    def __init__(self):
        self.keys = []

    def insert(self, key):
        i = bisect.bisect_left(self.keys, key)
        if i < len(self.keys) and self.keys[i] == key:
            return False
        self.keys.insert(i, key)
        return True

    def delete(self, key):
        i = bisect.bisect_left(self.keys, key)
        if i < len(self.keys) and self.keys[i] == key:
            del self.keys[i]
            return True
        return False

    def contains(self, key):
        i = bisect.bisect_left(self.keys, key)
        return i < len(self.keys) and self.keys[i] == key

    def successor(self, key):
        i = bisect.bisect_right(self.keys, key)
        return self.keys[i] if i < len(self.keys) else None

    def predecessor(self, key):
        i = bisect.bisect_left(self.keys, key)
        return self.keys[i - 1] if i > 0 else None


def time_operation(structure, op, keys):
    fn = getattr(structure, op)
    t_start = time.time()
    results = [fn(k) for k in keys]
    return time.time() - t_start, results


def run_benchmark(keys, sample, universe):
    """
    Time every operation on the veb tree and on the sorted list baseline
    Input:
        keys (list): Distinct keys to insert
        sample (list): Keys used for the lookup and delete rounds
        universe (int): Universe size of the veb tree
    Output:
        rows (list): (operation, veb seconds, baseline seconds, results agree)
    """
    veb = VEB(universe)
    baseline = SortedListSet()
    rows = []
    for op, op_keys in [("insert", keys), ("contains", sample),
                        ("successor", sample), ("predecessor", sample),
                        ("delete", sample)]:
        print("Benchmarking {}...".format(op))
        v_time, v_res = time_operation(veb, op, tqdm(op_keys))
        b_time, b_res = time_operation(baseline, op, op_keys)
        rows.append((op, v_time, b_time, v_res == b_res))
    return rows


def print_rows(rows):
    print("{:<12}{:>12}{:>14}{:>10}".format("Operation", "VEB (s)", "Baseline (s)", "Correct"))
    for op, v_time, b_time, ok in rows:
        print("{:<12}{:>12.4f}{:>14.4f}{:>10}".format(op, v_time, b_time, "yes" if ok else "NO"))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark the veb tree against a sorted list")
    parser.add_argument('--count', type=int, default=100000,
                        help='Number of elements to generate.')
    parser.add_argument('--density', type=float, default=0.01,
                        help='Data density (e.g., 0.01 for 1%%). Lower is sparser.')
    parser.add_argument('--sample', type=int, default=10000,
                        help='Number of keys used in the lookup and delete rounds.')
    parser.add_argument('--seed', type=int, default=0,
                        help='Random seed for the generated keys.')
    args = parser.parse_args(argv)

    # density = count / universe_size  => universe_size = count / density
    universe = int(args.count / args.density)
    keys = [int(k) for k in generate_keys(args.count, universe, seed=args.seed)]
    rng = np.random.default_rng(args.seed + 1)
    sample = [int(k) for k in rng.choice(keys, size=min(args.sample, len(keys)), replace=False)]
    rows = run_benchmark(keys, sample, universe)
    print_rows(rows)
    return rows


if __name__ == "__main__":
    main()
