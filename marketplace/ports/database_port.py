from abc import ABC

from marketplace.ports.question_port import QuestionPort
from marketplace.ports.user_port import UserPort
from marketplace.ports.verification_port import VerificationPort


class DatabasePort(UserPort, VerificationPort, QuestionPort, ABC):
    """
    Aggregate port for CRUD operations against the data store.
    Inherits from domain-specific ports to strictly follow ISP.
    """
