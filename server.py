#!/usr/bin/env python3
import webbrowser

import uvicorn

import config
from app import app


def main():
    config.configure_logging()
    url = f"http://{config.HOST}:{config.PORT}"
    print(f"todo server running at {url}")
    print("API endpoints:")
    print("   GET    /api/todos      - Get all todos")
    print("   POST   /api/todos      - Add a todo")
    print("   PUT    /api/todos/:id  - Mark todo as done")
    print("   DELETE /api/todos/:id  - Delete a todo")
    print(f"Storing todos in {config.TODOS_FILE}")
    if config.OPEN_BROWSER:
        webbrowser.open(url)
    # Request logs stay off; the store logs what changed.
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower(), access_log=False)


if __name__ == "__main__":
    main()
