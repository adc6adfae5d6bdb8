"""Main entry point for GeoRisk Scanner."""

import sys
from loguru import logger


def main():
    """Run the application."""
    if len(sys.argv) < 2:
        print("Usage: python main.py [api|ui|analyze|report]")
        sys.exit(1)

    cmd = sys.argv[1]

    import georisk.utils.logger  # noqa: F401
    from georisk.core import GeoRiskError
    from georisk.utils.config import settings

    try:
        if cmd == "api":
            import uvicorn
            logger.info("Starting API server...")
            uvicorn.run(
                "georisk.api.main:app",
                host=settings.api.host,
                port=settings.api.port,
                reload=settings.api.reload,
            )

        elif cmd == "ui":
            import subprocess
            logger.info("Starting Streamlit UI...")
            subprocess.run(["streamlit", "run", "georisk/ui/app.py", "--server.port", str(settings.ui.port)])

        elif cmd == "analyze":
            from georisk.core import analyzer, format_output
            result = analyzer.analyze(**_location_args(sys.argv[2:]))
            print(format_output(result, "municipal"))

        elif cmd == "report":
            from georisk.core import analyzer, build_report, exporter
            if len(sys.argv) < 3:
                print("Usage: python main.py report <vereda> [txt|pdf]")
                sys.exit(1)
            fmt = sys.argv[3] if len(sys.argv) > 3 else settings.export.default_format
            result = analyzer.analyze(district=sys.argv[2])
            path = exporter.export(build_report(result), fmt).write()
            print(f"Reporte guardado: {path}")

        else:
            print(f"Unknown command: {cmd}")
            sys.exit(1)

    except GeoRiskError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)


def _location_args(args: list[str]) -> dict:
    if len(args) == 1:
        return {"district": args[0]}
    if len(args) == 2:
        return {"lat": args[0], "lng": args[1]}
    print("Usage: python main.py analyze <vereda> | <lat> <lng>")
    sys.exit(1)


if __name__ == "__main__":
    main()
