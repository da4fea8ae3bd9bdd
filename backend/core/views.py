from __future__ import annotations

import logging

from rest_framework import status, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.fx import EnvProvider, parse_pairs, refresh_fx

logger = logging.getLogger(__name__)


class FxRefreshView(views.APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        if not request.user.is_staff:
            return Response({"detail": "Forbidden"}, status=status.HTTP_403_FORBIDDEN)

        pairs_arg = request.data.get("pairs")
        if not pairs_arg:
            return Response(
                {"detail": "pairs is required, e.g., ['USD:MYR','EUR:MYR']"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            pairs = parse_pairs(pairs_arg)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            summary = refresh_fx(pairs, EnvProvider(), source_label="ENV")
        except ValueError as e:
            logger.warning("FX refresh failed: %s", e)
            return Response(
                {"detail": f"ENV provider failed: {e}"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response({"updated": summary}, status=status.HTTP_200_OK)
