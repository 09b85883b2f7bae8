"""Contact service entry point.

Allows running the API via: python -m contact_service
"""

from contact_service.api.main import run

if __name__ == "__main__":
    run()
