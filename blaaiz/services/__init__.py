from blaaiz.services.banks import BankService
from blaaiz.services.collection import CollectionService
from blaaiz.services.currencies import CurrencyService
from blaaiz.services.customers import CustomerService
from blaaiz.services.fees import FeesService
from blaaiz.services.files import FileService
from blaaiz.services.payouts import PayoutService
from blaaiz.services.transactions import TransactionService
from blaaiz.services.virtual_bank_accounts import VirtualBankAccountService
from blaaiz.services.wallets import WalletService
from blaaiz.services.webhooks import WebhookService

__all__ = [
    "BankService",
    "CollectionService",
    "CurrencyService",
    "CustomerService",
    "FeesService",
    "FileService",
    "PayoutService",
    "TransactionService",
    "VirtualBankAccountService",
    "WalletService",
    "WebhookService",
]
