import sys
import os

# Allow running from a source checkout without installing the package
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    from atm_controller.main import main

    sys.exit(main())
