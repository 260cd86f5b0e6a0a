"""Entry point: python -m mail_relay"""

from mail_relay.api.main import run

if __name__ == "__main__":
    run()
