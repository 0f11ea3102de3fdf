import argparse
import uvicorn
from app.core.config import settings

def main():
    parser = argparse.ArgumentParser(description=f"Run the {settings.PROJECT_NAME} server")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to run the server on (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (default: based on DEBUG setting)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes; ignored when reloading"
    )

    args = parser.parse_args()

    use_reload = args.reload or settings.DEBUG

    if settings.DEBUG:
        print(f"Starting {settings.PROJECT_NAME} {settings.VERSION} in {settings.ENVIRONMENT} mode")
        print(f"Database: {settings.DATABASE_URL}")
        print(f"Auto-reload: {'enabled' if use_reload else 'disabled'}")
        print(f"Feed endpoint: http://{args.host}:{args.port}{settings.API_V1_STR}/posts")
        print(f"API documentation: http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=use_reload,
        workers=None if use_reload else args.workers,
    )

if __name__ == "__main__":
    main()
