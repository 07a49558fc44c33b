# orders/views/ratings.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order
from orders.serializers import RatingSerializer
from orders.serializers.rating import RatingInputSerializer
from orders.services import DuplicateRatingError, RatingError, RatingNotAllowedError, rate_order
from orders.views.common import error_response


class RateOrderView(APIView):
    """
    POST /api/orders/<id>/ratings/  {"rating_type": "store"|"delivery", "rating": 1-5, "comment": ""}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(request=RatingInputSerializer, responses={201: RatingSerializer})
    def post(self, request, order_id):
        serializer = RatingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            row = rate_order(
                order_id=order_id,
                rater=request.user,
                rating_type=data["rating_type"],
                rating=data["rating"],
                comment=data.get("comment", ""),
            )
        except Order.DoesNotExist:
            return error_response(code="NOT_FOUND", message="Order not found", http_status=status.HTTP_404_NOT_FOUND)
        except RatingNotAllowedError as exc:
            return error_response(code="FORBIDDEN", message=str(exc), http_status=status.HTTP_403_FORBIDDEN)
        except DuplicateRatingError as exc:
            return error_response(code="DUPLICATE_RATING", message=str(exc), http_status=status.HTTP_409_CONFLICT)
        except RatingError as exc:
            return error_response(code="RATING_ERROR", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)

        return Response(RatingSerializer(row).data, status=status.HTTP_201_CREATED)
