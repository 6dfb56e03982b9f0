"""
Integrations API Views

Admin endpoints for the global calendar provider credentials.
Records are addressed by provider type (`google` or `microsoft`).
"""

import logging

from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from api.exceptions import InvalidInputError

from .credentials import CalendarCredentialStore
from .serializers import CalendarCredentialSerializer

logger = logging.getLogger(__name__)


class CalendarCredentialViewSet(viewsets.ViewSet):
    """
    ViewSet for calendar credentials.

    list: All stored credential records
    retrieve: Record for one provider type
    create: Create or replace the record for `type`
    update: Replace the record for the type in the URL
    destroy: Remove the record; adapters fall back to settings
    """

    permission_classes = [permissions.IsAuthenticated, permissions.IsAdminUser]
    lookup_field = 'type'
    lookup_value_regex = '[a-z]+'

    def get_store(self):
        return CalendarCredentialStore()

    def list(self, request):
        records = self.get_store().list()
        return Response(CalendarCredentialSerializer(records, many=True).data)

    def retrieve(self, request, type=None):
        record = self.get_store().find(type)
        return Response(CalendarCredentialSerializer(record).data)

    def create(self, request):
        serializer = CalendarCredentialSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = self.get_store().save(serializer.validated_data)
        logger.info(f"Calendar credentials for {record.type} saved by user {request.user.pk}")
        return Response(CalendarCredentialSerializer(record).data, status=status.HTTP_201_CREATED)

    def update(self, request, type=None):
        submitted = request.data.get('type')
        if submitted and submitted != type:
            raise InvalidInputError("Provider type in body does not match the URL", field_name='type')

        serializer = CalendarCredentialSerializer(data={**request.data, 'type': type})
        serializer.is_valid(raise_exception=True)
        record = self.get_store().save(serializer.validated_data)
        return Response(CalendarCredentialSerializer(record).data)

    def destroy(self, request, type=None):
        self.get_store().delete(type)
        return Response(status=status.HTTP_204_NO_CONTENT)
