"""
Candidate record models.

Provisional student and score entries produced by the extraction engine
for human review before import. Serialized with the camelCase keys the
bulk student upload and result entry endpoints accept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Any


CA_MAX = 20
EXAM_MAX = 60


def clamp_score(value: int, maximum: int) -> int:
    """Clamp a recognized score into ``[0, maximum]``."""
    return max(0, min(int(value), maximum))


@dataclass
class CandidateStudent:
    """
    Student detected on a scanned class list.

    ``name`` and ``reg_no`` are always populated on emission; the
    registration number is synthesized when none was recognized.
    """

    name: str
    reg_no: str
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the import payload shape (optional fields omitted)."""
        data: dict[str, Any] = {"name": self.name, "regNo": self.reg_no}
        if self.parent_phone:
            data["parentPhone"] = self.parent_phone
        if self.parent_email:
            data["parentEmail"] = self.parent_email
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateStudent":
        return cls(
            name=data["name"],
            reg_no=data["regNo"],
            parent_phone=data.get("parentPhone"),
            parent_email=data.get("parentEmail"),
        )


@dataclass
class CandidateScoreRow:
    """
    Subject scores detected on a scanned result sheet.

    Scores are clamped on construction: CA1 and CA2 to 0..20, exam to 0..60.
    """

    subject: str
    ca1: int
    ca2: int
    exam: int

    def __post_init__(self):
        self.ca1 = clamp_score(self.ca1, CA_MAX)
        self.ca2 = clamp_score(self.ca2, CA_MAX)
        self.exam = clamp_score(self.exam, EXAM_MAX)

    @property
    def total(self) -> int:
        return self.ca1 + self.ca2 + self.exam

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "ca1": self.ca1,
            "ca2": self.ca2,
            "exam": self.exam,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateScoreRow":
        return cls(
            subject=data["subject"],
            ca1=data.get("ca1", 0),
            ca2=data.get("ca2", 0),
            exam=data.get("exam", 0),
        )
