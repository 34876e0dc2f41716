"""Точка входа настольного приложения."""
from engraver.app import EngraverApp
from engraver.logging_config import setup_logging


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    setup_logging()
    app = EngraverApp()
    app.mainloop()


if __name__ == "__main__":
    main()
