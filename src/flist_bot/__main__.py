from flist_bot.clients import disc


def main() -> None:
    disc.run()


if __name__ == "__main__":
    main()
