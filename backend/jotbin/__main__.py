import uvicorn

from jotbin import config


def main() -> None:
    uvicorn.run("jotbin.main:app", host=config.host(), port=config.port(), log_config=None)


if __name__ == "__main__":
    main()
