import argparse
import os
import time
import numpy as np
from veb import VEB
from tqdm import tqdm


def load_keys(keys_path):
    """
    Function that loads integer keys from a .npy array or a text file
    with one integer per line
    """
    if keys_path.endswith(".npy"):
        keys = np.load(keys_path)
    else:
        keys = np.loadtxt(keys_path, dtype=np.int64, ndmin=1)
    return keys.astype(np.int64).ravel()


def save_keys(output_path, keys):
    """
    Function that stores keys with the same format load_keys reads
    """
    keys = np.asarray(keys, dtype=np.int64)
    if output_path.endswith(".npy"):
        np.save(output_path, keys)
    else:
        np.savetxt(output_path, keys, fmt="%d")
    return output_path


def sort_keys(keys, universe=None, progress=False):
    """
    Sort the distinct keys by pushing them through a veb tree
    Input:
        keys (np.array): The integer keys in any order
        universe (int): Upper bound on the keys, defaults to max(keys) + 1
        progress (bool): Whether to show a progress bar while inserting
    Output:
        sorted_keys (np.array): The distinct keys in ascending order
    """
    if len(keys) == 0:
        return np.zeros(0, dtype=np.int64)
    if universe is None:
        universe = int(np.max(keys)) + 1
    veb = VEB(universe)
    for k in tqdm(keys, disable=not progress):
        veb.insert(int(k))
    return veb.to_array()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Sort integer keys with a veb tree")
    parser.add_argument("--keys_path", type=str, required=True,
                        help="Path to the keys (.npy or text, one integer per line)")
    parser.add_argument("--output_path", type=str, default="./SORTED/keys_sorted.txt",
                        help="Where the sorted distinct keys are written")
    parser.add_argument("--universe", type=int, default=None,
                        help="Universe size of the veb tree, defaults to max key + 1")
    args = parser.parse_args(argv)

    output_dir = os.path.dirname(args.output_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    t_start = time.time()
    keys = load_keys(args.keys_path)
    print("Loaded {} keys from {}".format(len(keys), args.keys_path))
    sorted_keys = sort_keys(keys, universe=args.universe, progress=True)
    save_keys(args.output_path, sorted_keys)
    print("{} distinct keys written to {}".format(len(sorted_keys), args.output_path))
    print("Sorting takes {}".format(time.time() - t_start))
    return sorted_keys


if __name__ == "__main__":
    main()
