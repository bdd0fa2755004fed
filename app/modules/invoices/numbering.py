"""
Generación de números de factura con formato INV-<8 dígitos de tiempo>-<3 dígitos aleatorios>
"""

import random
import re
import time

INVOICE_NUMBER_PREFIX = "INV"
INVOICE_NUMBER_PATTERN = re.compile(r"^INV-\d{8}-\d{3}$")


def generate_invoice_number() -> str:
    """Candidato de número de factura; la unicidad se verifica al persistir."""
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = f"{random.randint(0, 999):03d}"
    return f"{INVOICE_NUMBER_PREFIX}-{timestamp}-{suffix}"
