"""
Booking enums shared with the booking backend.
"""
from enum import Enum


class ServiceType(str, Enum):
    SIXTY_MIN = '60min'
    NINETY_MIN = '90min'
    ONE_TWENTY_MIN = '120min'
    CONSULTATION = 'consultation'
    FOLLOW_UP = 'follow_up'


class PaymentStatus(str, Enum):
    UNPAID = 'unpaid'
    PAID = 'paid'
    PARTIAL = 'partial'
    REFUNDED = 'refunded'
    COMPLIMENTARY = 'complimentary'


class SessionStatus(str, Enum):
    SCHEDULED = 'scheduled'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'
    PENDING_APPROVAL = 'pending_approval'
    COMP_REQUEST = 'comp_request'


class PaymentMethod(str, Enum):
    CREDIT_CARD = 'credit_card'
    CASH = 'cash'
    BANK_TRANSFER = 'bank_transfer'
    INSURANCE = 'insurance'
    OTHER = 'other'
    COMP = 'comp'
