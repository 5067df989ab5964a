import argparse
import os

from typing import List, Optional, Sequence

from .load_data import DataHandler, Point
from .smoother import DEFAULT_FRACTION, DEFAULT_ITERATIONS, smooth_arrays
from .plot import lowessPlot


def main(argv: Optional[Sequence[str]] = None) -> None:
    argparser = argparse.ArgumentParser(
        description="Robust LOWESS smoothing of a two-column point file.",
    )

    argparser.add_argument("points", type=str, help="Path to the delimited (x, y) points file")
    argparser.add_argument("output", type=str, help="Path to the output file of smoothed points")

    parsing_group = argparser.add_argument_group('Input Options')
    parsing_group.add_argument(
        "--x-col",
        type=int,
        default=0,
        help="0-based column holding x values. (default: 0)",
    )
    parsing_group.add_argument(
        "--y-col",
        type=int,
        default=1,
        help="0-based column holding y values. (default: 1)",
    )
    parsing_group.add_argument(
        "--delimiter",
        type=str,
        default="\t",
        help='Column delimiter of the points file. (default: "\\t")',
    )

    smoothing_group = argparser.add_argument_group('Smoothing Options')
    smoothing_group.add_argument(
        "--fraction",
        type=float,
        default=DEFAULT_FRACTION,
        help="Fraction of points used in each local fit. Must be in (0, 1]. Larger values give smoother curves. (default: 0.667)",
    )
    smoothing_group.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help="Number of robustness iterations. 0 turns outlier down-weighting off. (default: 3)",
    )
    smoothing_group.add_argument(
        "--delta",
        type=float,
        default=0.0,
        help="Points closer than this in x to the last fitted point are interpolated instead of refitted. 0 fits every point. (default: 0.0)",
    )

    output_group = argparser.add_argument_group('Output Options')
    output_group.add_argument(
        "--input-order",
        action="store_true",
        default=False,
        help="Write smoothed points in the order of the input file instead of ascending x. (default: False)",
    )

    other_arguments_group = argparser.add_argument_group('Other Options')
    other_arguments_group.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print window size, per-pass fit counts and robustness scales. (default: False)",
    )
    other_arguments_group.add_argument(
        "--plot",
        action="store_true",
        default=False,
        help="Create a plot of the samples and fitted curve. Written to <output_prefix>.lowess.png (default: False)",
    )

    args = argparser.parse_args(argv)
    output_prefix = os.path.splitext(args.output)[0]

    # -- load data --
    data_handler = DataHandler(
        points_path=args.points,
        x_col=args.x_col,
        y_col=args.y_col,
        delimiter=args.delimiter,
        debug=args.debug,
    )
    points = data_handler.load_data()

    # -- smooth --
    smoothed = smooth_arrays(
        [p.x for p in points],
        [p.y for p in points],
        fraction=args.fraction,
        iterations=args.iterations,
        delta=args.delta,
        debug=args.debug,
    )

    fitted = smoothed.result.fitted
    x = smoothed.x
    if args.input_order:
        fitted = smoothed.in_input_order(fitted)
        x = smoothed.in_input_order(x)

    out_points: List[Point] = [Point(float(px), float(py)) for px, py in zip(x, fitted)]
    DataHandler.write_points(args.output, out_points)
    if args.debug:
        print(f"[DEBUG] Wrote {len(out_points)} smoothed points to {args.output}.")

    # -- make plot --
    if args.plot:
        plot_path = f"{output_prefix}.lowess.png"
        lowessPlot(
            x=smoothed.x,
            y=smoothed.y,
            fitted_x=smoothed.x,
            fitted_y=smoothed.result.fitted,
            output_path=plot_path,
            robustness_weights=smoothed.result.robustness_weights,
            title=os.path.basename(args.points),
        )
        if args.debug:
            print(f"[DEBUG] Wrote plot to {plot_path}.")


if __name__ == "__main__":
    main()
