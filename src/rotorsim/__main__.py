"""Allow running the simulator with ``python -m rotorsim``."""
from rotorsim.main import main


if __name__ == "__main__":
    main()
