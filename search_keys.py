import argparse
import os
import time
from key_index import KeyIndex
from sort_keys import load_keys
from tqdm import tqdm


def run_queries(index, queries, pre_step, succ_step, max_dist=None):
    """
    Search every query key in the index
    Input:
        index (KeyIndex): The index built from the key file
        queries (iterable of int): The query keys
        pre_step (int): The number of keys visited in the backward search
        succ_step (int): The number of keys visited in the forward search
        max_dist (int): Largest key distance a result may have
    Output:
        results (list): One sorted result list per query
    """
    results = []
    for q in tqdm(queries):
        results.append(index.search(int(q), pre_step=pre_step,
                                    succ_step=succ_step, max_dist=max_dist))
    return results


def write_results(save_path, results):
    with open(save_path, 'w') as fw:
        fw.write("query,index,distance,item\n")
        for res in results:
            for r in res:
                fw.write("{},{},{},{}\n".format(r['query'], r['index'],
                                               r['distance'], r['item']))
    return save_path


def main(argv=None):
    parser = argparse.ArgumentParser("Search for the neighbors of query keys")
    parser.add_argument("--keys_path", type=str, required=True,
                        help="The path to the indexed keys, an item is the key's line number")
    parser.add_argument("--query_path", type=str, required=True,
                        help="The path to the query keys")
    parser.add_argument("--universe", type=int, default=None,
                        help="Universe size of the veb tree, defaults to max key + 1")
    parser.add_argument("--pre_step", type=int, default=10,
                        help="The number of steps in the backward search")
    parser.add_argument("--succ_step", type=int, default=10,
                        help="The number of steps in the forward search")
    parser.add_argument("--max_dist", type=int, default=None,
                        help="Largest distance between a query and a result key")
    parser.add_argument("--save_path", type=str, default="./QUERY_RESULTS/results.csv",
                        help="Where the search results are written")
    args = parser.parse_args(argv)

    save_dir = os.path.dirname(args.save_path)
    if save_dir and not os.path.exists(save_dir):
        os.makedirs(save_dir)

    t_start = time.time()
    index = KeyIndex.from_keys(load_keys(args.keys_path), universe_size=args.universe)
    print(index)
    print("Building index takes {}".format(time.time() - t_start))

    queries = load_keys(args.query_path)
    # Queries outside the universe have no neighbors to walk
    queries = [q for q in queries if 0 <= q < index.universe_size]
    t_start = time.time()
    results = run_queries(index, queries, args.pre_step, args.succ_step,
                          max_dist=args.max_dist)
    print("Search takes {}".format(time.time() - t_start))
    write_results(args.save_path, results)
    print("Results written to {}".format(args.save_path))
    return results


if __name__ == "__main__":
    main()
