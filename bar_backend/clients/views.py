# clients/views.py

"""
CLIENT VIEWSET

- CRUD (writes need role tier >= admin, reads >= user)
- GET   /api/clients/exceeded-credit/
- PATCH /api/clients/<id>/balance/   {"amount": <signed decimal>}
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clients.models import Client
from clients.serializers import BalanceAdjustSerializer, ClientSerializer
from clients.services import adjust_balance
from permissions.roles import ROLE_ADMIN, ROLE_USER, HasMinimumRole


class ClientViewSet(viewsets.ModelViewSet):
    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated, HasMinimumRole]
    minimum_role = ROLE_USER
    write_minimum_role = ROLE_ADMIN

    filterset_fields = {
        "name": ["icontains"],
        "email": ["iexact"],
        "phone": ["exact"],
    }

    def get_queryset(self):
        return Client.objects.all().order_by("name")

    @extend_schema(responses={200: ClientSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="exceeded-credit")
    def exceeded_credit(self, request):
        qs = Client.objects.exceeded_credit().order_by("name")
        return Response(self.get_serializer(qs, many=True).data)

    @extend_schema(
        request=BalanceAdjustSerializer,
        responses={
            200: ClientSerializer,
            400: OpenApiResponse(description="Balance would go negative or exceed the credit limit"),
            404: OpenApiResponse(description="Client not found"),
        },
    )
    @action(detail=True, methods=["patch"], url_path="balance")
    def balance(self, request, pk=None):
        client = self.get_object()

        ser = BalanceAdjustSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        updated = adjust_balance(client.pk, ser.validated_data["amount"])
        return Response(self.get_serializer(updated).data)
