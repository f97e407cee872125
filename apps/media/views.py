"""Media endpoints: upload links, direct uploads and signed view URLs."""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.parsers import FormParser, MultiPartParser  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.api.responses import success_response
from shared.domain.errors import DomainValidationError

from . import services
from .serializers import PresignedUrlRequestSerializer, UploadTokenSerializer, ViewUrlQuerySerializer


class PresignedUrlView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = PresignedUrlRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        upload = services.create_upload_token(
            request.user,
            file_name=data["file_name"],
            content_type=data["file_type"],
            folder=data["folder"],
        )
        return success_response(
            UploadTokenSerializer(upload, context={"request": request}).data,
            message="Presigned URL generated successfully",
        )


class TokenUploadView(APIView):
    """PUT с сырым телом файла; авторизация по одноразовому токену в URL."""

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def put(self, request, token: str):  # type: ignore
        result = services.consume_upload_token(token, request.body, request.META.get("CONTENT_TYPE"))
        return success_response(result, message="File uploaded", status_code=status.HTTP_201_CREATED)


class UploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):  # type: ignore
        uploaded = request.FILES.get("file")
        if uploaded is None:
            raise DomainValidationError("No file provided")
        folder = request.data.get("folder") or services.DEFAULT_FOLDER
        result = services.upload_file(request.user, uploaded, folder)
        return success_response(result, message="File uploaded successfully", status_code=status.HTTP_201_CREATED)


class UploadMultipleView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):  # type: ignore
        folder = request.data.get("folder") or services.DEFAULT_FOLDER
        results = services.upload_files(request.user, request.FILES.getlist("files"), folder)
        return success_response(results, message="Files uploaded successfully", status_code=status.HTTP_201_CREATED)


class FileDeleteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, key: str):  # type: ignore
        services.delete_file(request.user, key)
        return success_response(message="File deleted successfully")


class FileViewUrlView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, key: str):  # type: ignore
        query = ViewUrlQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = services.view_url(request.user, key, query.validated_data.get("expires_in"))
        return success_response(result, message="View URL generated successfully")


class FileInfoView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, key: str):  # type: ignore
        return success_response(services.file_info(request.user, key), message="File information retrieved successfully")
