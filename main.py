import argparse

import uvicorn

from quizapp.config import settings

APPS = {
    "oracle": ("quizapp.app:create_oracle_app", 3000),
    "client": ("quizapp.app:create_client_app", 8000),
}


def main():
    parser = argparse.ArgumentParser(description="Run the quiz answer oracle or the quiz client.")
    parser.add_argument("component", choices=sorted(APPS))
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args()

    factory, default_port = APPS[args.component]
    uvicorn.run(
        factory,
        factory=True,
        host=args.host,
        port=args.port or default_port,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
