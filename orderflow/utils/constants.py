"""
Constantes partagees par les services et la validation des entrees.
"""

import re

# Moyens de paiement acceptes par defaut (surchargeables via la configuration)
DEFAULT_PAYMENT_METHODS = ("credit_card", "alipay", "wechat_pay", "bank_transfer")

# 3 a 20 caracteres alphanumeriques ou underscore
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")

# Au moins 8 caracteres dont une lettre et un chiffre
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d).{8,}$")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Duree de validite des jetons (verification email, reinitialisation mot de passe)
EMAIL_TOKEN_TTL = 24 * 60 * 60  # 24 heures
RESET_TOKEN_TTL = 60 * 60  # 1 heure
