# petspa/data.py

# Base price per bath type (BRL)
BATH_PRICES = {
    "Banho Simples": 30,
    "Banho Terapêutico": 45,
    "Banho e Tosa": 60,
}

SIZE_MULTIPLIER = {
    "pequeno": 1,
    "medio": 1.25,
    "grande": 1.5,
}

EXTRA_PRICES = {
    "nail_trimming": 10,
    "hydration": 20,
    "ear_cleaning": 15,
}

# Placeholders written on admin blocks
BLOCK_CLIENT_NAME = "Horário Bloqueado"
BLOCK_PET_NAME = "Admin"
BLOCK_SERVICE = "N/A"

DEFAULT_RULE_LABEL = "Clubinho"
