"""Run the URL shortener with ``python -m shorting_urls``."""

from shorting_urls.main import run

if __name__ == "__main__":
    run()
