from enum import Enum


class MovementType(str, Enum):

    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class SourceType(str, Enum):

    GRN = "GRN"
    RECEIPT = "RECEIPT"
    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"
    REVERSAL = "REVERSAL"


class UnitOfMeasure(str, Enum):

    PCS = "PCS"
    KG = "KG"
    LITRE = "LITRE"
    BOX = "BOX"
    PACK = "PACK"


class PaymentMethod(str, Enum):

    cash = "CASH"
    card = "CARD"
    mobile_money = "MOMO"
    bank_transfer = "BANK"
    credit = "CREDIT"


class ReturnRejectionReason(str, Enum):

    STOCKOUT_NOT_FOUND = "STOCKOUT_NOT_FOUND"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    QUANTITY_EXCEEDED = "QUANTITY_EXCEEDED"
    STOCK_NOT_FOUND = "STOCK_NOT_FOUND"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"
    OPERATION_FAILED = "OPERATION_FAILED"
