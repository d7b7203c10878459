#!/usr/bin/env python3
"""
Generate synthetic CSV datasets for trying out the trainer.

Writes:
- linear.csv:     x1, x2, y with y = 2*x1 + 3*x2 (+ optional noise)
- binary.csv:     x1, x2, label in {0, 1}
- multiclass.csv: x1, x2, label in {A, B, C}, a few rows labelled 'Z'

'Z' only lands in the fallback category when the known labels are given;
without --labels the trainer infers Z as a fourth class:

    python main.py data/multiclass.csv --header --problem multiclass-classification --labels A B C

Run: python scripts/make_synthetic_data.py [--out-dir data] [--rows 2000]
"""

import argparse
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from dataset import make_binary_rows, make_blob_rows, make_linear_rows, write_rows


def main():
    """Main entry point for dataset generation."""
    parser = argparse.ArgumentParser(description="Generate synthetic CSV datasets")
    parser.add_argument("--out-dir", "-o", default="data",
                        help="Output directory (default: data)")
    parser.add_argument("--rows", "-n", type=int, default=2000,
                        help="Rows per dataset (default: 2000)")
    parser.add_argument("--noise", type=float, default=0.0,
                        help="Noise standard deviation for linear.csv")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    datasets = {
        "linear.csv": (make_linear_rows(args.rows, noise=args.noise, seed=args.seed),
                       ["x1", "x2", "y"]),
        "binary.csv": (make_binary_rows(args.rows, seed=args.seed),
                       ["x1", "x2", "label"]),
        "multiclass.csv": (make_blob_rows(args.rows, seed=args.seed, unknown_label="Z",
                                          unknown_fraction=0.02),
                           ["x1", "x2", "label"]),
    }

    for filename, (rows, header) in datasets.items():
        path = os.path.join(args.out_dir, filename)
        write_rows(path, rows, header=header)
        print(f"  Saved: {path} ({len(rows)} rows)")

    multiclass = os.path.join(args.out_dir, "multiclass.csv")
    print(f"\nTry: python main.py {multiclass} --header "
          f"--problem multiclass-classification --labels A B C")


if __name__ == "__main__":
    main()
