from rest_framework import mixins, status, viewsets
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsFnbManager

from .models import CsvUpload
from .serializers import CsvUploadInputSerializer, CsvUploadSerializer
from .services import process_csv


class CsvUploadViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Bulk CSV imports and their history.

    create: multipart ``csv`` file plus ``type``; the file is processed
    before the response is returned.
    """

    queryset = CsvUpload.objects.select_related('uploaded_by')
    serializer_class = CsvUploadSerializer
    permission_classes = [IsFnbManager]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(request=CsvUploadInputSerializer, responses={201: CsvUploadSerializer})
    def create(self, request):
        serializer = CsvUploadInputSerializer(data=request.data)
        if not serializer.is_valid():
            field_errors = next(iter(serializer.errors.values()))
            return Response({'error': str(field_errors[0])}, status=status.HTTP_400_BAD_REQUEST)

        upload_file = serializer.validated_data['csv']
        upload = process_csv(
            upload_type=serializer.validated_data['type'],
            file=upload_file,
            filename=upload_file.name,
            user=request.user,
        )

        return Response(
            {
                'message': 'CSV processed',
                'upload_id': upload.id,
                'upload': CsvUploadSerializer(upload).data,
            },
            status=status.HTTP_201_CREATED
        )
