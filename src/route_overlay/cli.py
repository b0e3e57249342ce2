"""
Route Overlay - Command Line Interface
Analyze a folder of recordings, or compare several files against the first.
"""

import logging
import os
import sys

from route_overlay.analyzer import RouteAnalyzer


USAGE = (
    "Usage: python -m route_overlay.cli <folder_path>\n"
    "       python -m route_overlay.cli <file> [<file> ...]"
)


def main(argv=None):
    """CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE)
        sys.exit(1)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    analyzer = RouteAnalyzer()

    if len(args) == 1 and os.path.isdir(args[0]):
        print(f"📂 Analyzing routes in: {args[0]}")
        print("=" * 60)
        results = analyzer.analyze_folder(args[0])
        print(f"\n✅ Processed {len(results)} file(s)")
        return

    missing = [path for path in args if not os.path.isfile(path)]
    if missing:
        print(f"❌ Error: {', '.join(missing)} not found")
        print(USAGE)
        sys.exit(1)

    routes = []
    for path in args:
        route = analyzer.load_file(path)
        if route is not None:
            analyzer.analyze_route(route)
            routes.append(route)

    if len(routes) > 1:
        analyzer.compare_routes(routes)

    print(f"\n✅ Processed {len(routes)} file(s)")


if __name__ == "__main__":
    main()
