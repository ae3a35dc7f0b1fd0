"""Domain types shared by the API server and the thumbnail worker."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from bson import ObjectId

from common.constants import ROOT_FOLDER_ID

# Matches no document; used in place of ids that are not valid ObjectIds.
NULL_ID = ObjectId("0" * 24)


def to_object_id(value: Any) -> ObjectId:
    """
    Convert a request-supplied id into an ObjectId.

    Invalid values map to NULL_ID so lookups simply find nothing.
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return NULL_ID


class FileType(str, Enum):
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: Any) -> Optional["FileType"]:
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class ParentRef:
    """
    Reference to the parent of a file node: either the root or a folder id.

    Parsed once from the request so the services never have to guess
    whether a parentId is a number, a string or an ObjectId.
    """
    folder_id: Optional[ObjectId] = None

    @classmethod
    def root(cls) -> "ParentRef":
        return cls(None)

    @classmethod
    def folder(cls, folder_id: ObjectId) -> "ParentRef":
        return cls(folder_id)

    @classmethod
    def parse(cls, value: Any) -> "ParentRef":
        """
        Build a reference from a request value.

        None, empty string, 0 and "0" designate the root. Anything else is
        a folder id; malformed ids become a reference that matches nothing.
        """
        if value is None or value == "" or value == ROOT_FOLDER_ID or value == str(ROOT_FOLDER_ID):
            return cls.root()
        if isinstance(value, (int, float)):
            value = str(value)
        return cls.folder(to_object_id(value))

    @property
    def is_root(self) -> bool:
        return self.folder_id is None

    def to_document(self) -> Union[int, ObjectId]:
        return ROOT_FOLDER_ID if self.is_root else self.folder_id

    def to_response(self) -> Union[int, str]:
        return ROOT_FOLDER_ID if self.is_root else str(self.folder_id)


@dataclass
class User:
    user_id: str
    email: str
    password_hash: str

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        return cls(
            user_id=str(document["_id"]),
            email=document["email"],
            password_hash=document["password"],
        )

    def to_response(self) -> Dict[str, Any]:
        return {"id": self.user_id, "email": self.email}


@dataclass
class FileNode:
    file_id: str
    owner_id: str
    name: str
    type: FileType
    is_public: bool
    parent: ParentRef
    local_path: Optional[str] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "FileNode":
        return cls(
            file_id=str(document["_id"]),
            owner_id=str(document["userId"]),
            name=document["name"],
            type=FileType(document["type"]),
            is_public=bool(document.get("isPublic", False)),
            parent=ParentRef.parse(document.get("parentId", ROOT_FOLDER_ID)),
            local_path=document.get("localPath"),
        )

    def to_response(self) -> Dict[str, Any]:
        return {
            "id": self.file_id,
            "userId": self.owner_id,
            "name": self.name,
            "type": self.type.value,
            "isPublic": self.is_public,
            "parentId": self.parent.to_response(),
        }


@dataclass
class Job:
    """
    Thumbnail job payload as it travels through the queue.
    """
    user_id: Optional[str]
    file_id: Optional[str]
    name: str = ""

    @classmethod
    def for_image(cls, user_id: str, file_id: str) -> "Job":
        return cls(
            user_id=user_id,
            file_id=file_id,
            name=f"Image thumbnail [{user_id}-{file_id}]",
        )

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Job":
        return cls(
            user_id=payload.get("userId") or None,
            file_id=payload.get("fileId") or None,
            name=payload.get("name") or "",
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "fileId": self.file_id, "name": self.name}


@dataclass
class ClaimedJob:
    """
    A job taken off the pending list, together with the raw entry needed
    to acknowledge or fail it.
    """
    job: Job
    raw: str
    payload: Dict[str, Any] = field(default_factory=dict)
