"""API views for managing reviews."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.properties.models import Property
from apps.users.permissions import IsAdmin, IsHost
from shared.api.pagination import EnvelopePagination, paginate
from shared.api.responses import success_response
from shared.api.views import EnvelopeMixin
from shared.domain.errors import NotFoundError

from . import services
from .models import Review
from .serializers import (
    AdminResponseSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    ReviewSummarySerializer,
    ReviewWriteSerializer,
)


class IsReviewerOrAdmin(permissions.BasePermission):
    """Allow guests to manage their reviews and admins to manage all."""

    def has_object_permission(self, request, view, obj: Review) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.can_be_managed_by(request.user)


class ReviewViewSet(EnvelopeMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Viewset for reading, editing and deleting reviews."""

    queryset = Review.objects.select_related("property", "user", "booking")
    serializer_class = ReviewSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsReviewerOrAdmin]
    envelope_messages = {"retrieve": "Review retrieved successfully"}

    def get_permissions(self):  # type: ignore
        if self.action == "owner_list":
            return [IsHost()]
        if self.action == "admin_response":
            return [IsAdmin()]
        if self.action == "user_list":
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def update(self, request, *args, **kwargs):  # type: ignore
        review = self.get_object()
        serializer = ReviewWriteSerializer(data=request.data, partial=kwargs.get("partial", False))
        serializer.is_valid(raise_exception=True)
        review = services.update_review(review, serializer.validated_data)
        return success_response(ReviewSerializer(review).data, message="Review updated successfully")

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.delete_review(self.get_object())
        return success_response(message="Review deleted successfully")

    @action(detail=False, methods=["get", "post"], url_path=r"property/(?P<property_id>\d+)")
    def property_reviews(self, request, property_id=None):  # type: ignore
        if request.method == "POST":
            serializer = ReviewCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            review = services.create_review(request.user, int(property_id), **serializer.validated_data)
            return success_response(
                ReviewSerializer(review).data,
                message="Review added successfully",
                status_code=status.HTTP_201_CREATED,
            )

        property_obj = Property.objects.filter(pk=property_id).first()
        if property_obj is None:
            raise NotFoundError("Property not found")

        queryset = self.get_queryset().filter(property=property_obj)
        rating = request.query_params.get("rating")
        if rating and rating.isdigit():
            queryset = queryset.filter(rating=int(rating))
        verified = request.query_params.get("verified")
        if verified in {"true", "false"}:
            queryset = queryset.filter(is_verified=verified == "true")

        paginator = EnvelopePagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        data = {
            "items": ReviewSerializer(page, many=True).data,
            "pagination": paginator.get_pagination_meta(),
            "summary": ReviewSummarySerializer(services.property_summary(property_obj)).data,
        }
        return success_response(data, message="Reviews retrieved successfully")

    @action(detail=False, methods=["get"], url_path="user/list")
    def user_list(self, request):  # type: ignore
        queryset = self.get_queryset().filter(user=request.user)
        return paginate(self, queryset, ReviewSerializer, message="User reviews retrieved successfully")

    @action(detail=False, methods=["get"], url_path="owner/list")
    def owner_list(self, request):  # type: ignore
        queryset = self.get_queryset().filter(property__owner=request.user)
        property_id = request.query_params.get("property_id")
        if property_id and property_id.isdigit():
            queryset = queryset.filter(property_id=int(property_id))
        return paginate(
            self, queryset, ReviewSerializer, message="Property owner reviews retrieved successfully"
        )

    @action(detail=True, methods=["put"], url_path="admin-response")
    def admin_response(self, request, pk=None):  # type: ignore
        review = self.get_object()
        serializer = AdminResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = services.respond_as_admin(review, serializer.validated_data["admin_response"])
        return success_response(ReviewSerializer(review).data, message="Admin response added successfully")
