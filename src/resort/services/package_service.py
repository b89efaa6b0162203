import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from uuid import uuid4

from resort.models.packages import Package, PackageType
from resort.repository.package_repo import PackageRepository
from resort.schemas.packages import PackageRequest, PackageUpdateRequest
from resort.services.pricing import derive_package
from resort.utils.constants import MAX_PACKAGE_IMAGES
from resort.utils.custom_exceptions import (
    InvalidInput,
    InvariantViolation,
    NotFoundException,
    PackageAlreadyExists,
)
from resort.utils.slug import slugify

logger = logging.getLogger(__name__)


class PackageService:
    def __init__(self, package_repo: PackageRepository):
        self.package_repo = package_repo

    def list_packages(
        self,
        is_active: Optional[bool] = None,
        package_type: Optional[PackageType] = None,
    ) -> List[Package]:
        packages = self.package_repo.list_packages(
            is_active=is_active, package_type=package_type
        )
        return sorted(
            packages,
            key=lambda p: (p.popularity_score, p.created_at),
            reverse=True,
        )

    def get_package(self, id_or_slug: str) -> Package:
        package = self.package_repo.get_package_by_id(id_or_slug)
        if package is None:
            package = self.package_repo.get_package_by_slug(id_or_slug)
        if package is None:
            raise NotFoundException("package", id_or_slug, 404)
        return package

    def create_package(self, req: PackageRequest) -> Package:
        if self.package_repo.get_package_by_name(req.name) is not None:
            raise PackageAlreadyExists(f"Package with name '{req.name}' already exists")

        slug = slugify(req.name)
        if not slug:
            raise InvalidInput("Package name must contain letters or digits")
        if self.package_repo.get_package_by_slug(slug) is not None:
            raise PackageAlreadyExists(f"Package with slug '{slug}' already exists")

        package = derive_package(
            Package(
                package_id=str(uuid4()),
                name=req.name,
                slug=slug,
                type=req.type,
                description=req.description,
                features=list(req.features),
                items=[item.to_domain() for item in req.items],
                discount_percent=req.discount_percent,
                images=list(req.images),
                is_active=True,
            )
        )
        self._check_image_cap(package)
        self.package_repo.add_package(package)
        logger.info(f"Created package {package.package_id} ({package.slug})")
        return package

    def update_package(self, package_id: str, req: PackageUpdateRequest) -> Package:
        package = self._get_by_id(package_id)
        previous_name = package.name

        changes = {}
        if req.name is not None and req.name != package.name:
            if self.package_repo.get_package_by_name(req.name) is not None:
                raise PackageAlreadyExists(
                    f"Package with name '{req.name}' already exists"
                )
            changes["name"] = req.name
        if req.type is not None:
            changes["type"] = req.type
        if req.description is not None:
            changes["description"] = req.description
        if req.features is not None:
            changes["features"] = list(req.features)
        if req.items is not None:
            changes["items"] = [item.to_domain() for item in req.items]
        if req.discount_percent is not None:
            changes["discount_percent"] = req.discount_percent
        if req.is_active is not None:
            changes["is_active"] = req.is_active

        changes["images"] = merge_images(package.images, req.images, req.remove_images)
        updated = derive_package(
            replace(package, **changes, updated_at=datetime.now(timezone.utc))
        )
        self._check_image_cap(updated)
        self.package_repo.update_package(updated, previous_name=previous_name)
        return updated

    def delete_package(self, package_id: str) -> Package:
        package = self._get_by_id(package_id)
        self.package_repo.delete_package(package)
        logger.info(f"Deleted package {package_id}")
        return package

    def toggle_package(self, package_id: str) -> Package:
        package = self._get_by_id(package_id)
        updated = replace(
            package,
            is_active=not package.is_active,
            updated_at=datetime.now(timezone.utc),
        )
        self.package_repo.update_package(updated)
        return updated

    def remove_package_image(self, package_id: str, image_url: str) -> Package:
        package = self._get_by_id(package_id)
        if image_url not in package.images:
            raise NotFoundException("image", image_url, 404)

        images = [img for img in package.images if img != image_url]
        image = package.image
        if image == image_url:
            image = images[0] if images else ""
        updated = replace(
            package,
            images=images,
            image=image,
            updated_at=datetime.now(timezone.utc),
        )
        self.package_repo.update_package(updated)
        return updated

    def _get_by_id(self, package_id: str) -> Package:
        package = self.package_repo.get_package_by_id(package_id)
        if package is None:
            raise NotFoundException("package", package_id, 404)
        return package

    @staticmethod
    def _check_image_cap(package: Package):
        if len(package.images) > MAX_PACKAGE_IMAGES:
            raise InvariantViolation(
                f"package {package.package_id} has {len(package.images)} images"
            )


def merge_images(
    existing: Iterable[str], added: Iterable[str], removed: Iterable[str]
) -> List[str]:
    """Drop removed URLs, append new ones, keep the first MAX_PACKAGE_IMAGES."""
    removed = set(removed)
    images = [img for img in existing if img not in removed]
    images.extend(added)
    return images[:MAX_PACKAGE_IMAGES]
