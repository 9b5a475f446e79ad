"""Run the API with uvicorn on the fixed port: python -m users_api"""

import uvicorn

from users_api.config import SERVER_HOST, SERVER_PORT


def main() -> None:
    uvicorn.run("users_api.main:app", host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    main()
