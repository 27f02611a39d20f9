from enum import Enum


class ResultType(str, Enum):
    SERVICE = "service"
    PROFESSIONAL = "professional"

    def __str__(self):
        return self.value


class DiscountType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"

    def __str__(self):
        return self.value


class ServiceType(str, Enum):
    INSTALL = "Instalar"
    MAINTENANCE = "Mantenimiento"
    REPAIR = "Reparar"

    def __str__(self):
        return self.value


class LeadStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    def __str__(self):
        return self.value


class LeadEvent(str, Enum):
    CREATED = "lead.created"
    ACCEPTED = "lead.accepted"
    REJECTED = "lead.rejected"

    def __str__(self):
        return self.value
