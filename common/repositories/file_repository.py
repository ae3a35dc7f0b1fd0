"""File repository for MongoDB operations."""

from typing import List, Optional

from pymongo import ASCENDING

from common.logging_config import get_logger
from common.metadata_store import MetadataStore
from common.models import FileNode, FileType, ParentRef, to_object_id

logger = get_logger(__name__)


class FileRepository:
    def __init__(self, store: MetadataStore):
        self._store = store

    async def create_file(
        self,
        owner_id: str,
        name: str,
        file_type: FileType,
        is_public: bool,
        parent: ParentRef,
        local_path: Optional[str] = None,
    ) -> FileNode:
        document = {
            "userId": to_object_id(owner_id),
            "name": name,
            "type": file_type.value,
            "isPublic": is_public,
            "parentId": parent.to_document(),
        }
        if local_path is not None:
            document["localPath"] = local_path

        with self._store.guard("insert file"):
            result = await self._store.files.insert_one(document)

        file_id = str(result.inserted_id)
        logger.info(f"File created: {name} type={file_type.value} [file_id={file_id}] [user_id={owner_id}]")
        return FileNode(
            file_id=file_id,
            owner_id=owner_id,
            name=name,
            type=file_type,
            is_public=is_public,
            parent=parent,
            local_path=local_path,
        )

    async def get_by_id(self, file_id: str) -> Optional[FileNode]:
        with self._store.guard("find file"):
            document = await self._store.files.find_one({"_id": to_object_id(file_id)})
        return FileNode.from_document(document) if document else None

    async def get_owned(self, file_id: str, owner_id: str) -> Optional[FileNode]:
        """
        Fetch a file only if it belongs to owner_id.
        """
        query = {"_id": to_object_id(file_id), "userId": to_object_id(owner_id)}
        with self._store.guard("find file"):
            document = await self._store.files.find_one(query)
        return FileNode.from_document(document) if document else None

    async def list_files(
        self,
        owner_id: str,
        parent: Optional[ParentRef],
        skip: int,
        limit: int,
    ) -> List[FileNode]:
        """
        List an owner's files in creation order, optionally under one parent.
        """
        query = {"userId": to_object_id(owner_id)}
        if parent is not None:
            query["parentId"] = parent.to_document()

        with self._store.guard("list files"):
            cursor = self._store.files.find(query).sort("_id", ASCENDING).skip(skip).limit(limit)
            documents = await cursor.to_list()

        return [FileNode.from_document(document) for document in documents]

    async def set_public(self, file_id: str, owner_id: str, is_public: bool) -> bool:
        """
        Returns:
            True if a file owned by owner_id matched
        """
        query = {"_id": to_object_id(file_id), "userId": to_object_id(owner_id)}
        with self._store.guard("update file"):
            result = await self._store.files.update_one(query, {"$set": {"isPublic": is_public}})
        return result.matched_count > 0
