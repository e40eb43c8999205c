from .telegram.bot import run_polling

if __name__ == "__main__":  # pragma: no cover
    run_polling()
