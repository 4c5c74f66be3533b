from enum import Enum

class ExpenseCategory(str, Enum):
    FOOD = "food"
    ACCOMMODATION = "accommodation"
    ENTERTAINMENT = "entertainment"
    TRAVEL = "travel"
    MISCELLANEOUS = "miscellaneous"
    OTHER = "other"

class BookingType(str, Enum):
    HOTEL = "hotel"
    TRAVEL = "travel"

class TravelType(str, Enum):
    FLIGHT = "flight"
    TRAIN = "train"
    CAB = "cab"
    OTHERS = "others"

class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

class UserType(str, Enum):
    MEMBER = "member"
    INVITED = "invited"
