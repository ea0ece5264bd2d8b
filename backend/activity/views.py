from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsAdmin

from .serializers import ActivityQuerySerializer, ActivitySerializer
from .services import ActivityService


class ActivityListView(APIView):
    """
    Admin activity feed: newest first, `?action=` filter, `?limit=` (default 50).
    """

    permission_classes = [IsAdmin]

    def get(self, request):
        query = ActivityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        activities = ActivityService.list_activities(
            action=query.validated_data.get("action"),
            limit=query.validated_data.get("limit"),
        )
        return Response(ActivitySerializer(activities, many=True).data, status=status.HTTP_200_OK)
