"""Os testes do pacote ``shared`` importam ``shared.*`` a partir de ``services/``."""

import os
import sys
from pathlib import Path

SERVICES_DIR = Path(__file__).resolve().parents[2]

if str(SERVICES_DIR) not in sys.path:
    sys.path.insert(0, str(SERVICES_DIR))

# nenhum teste daqui deve abrir conexão Redis de verdade
os.environ["REDIS_URL"] = ""
