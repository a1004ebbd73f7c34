from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from config.api import ErrorCode, build_envelope, success_response


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Liveness probe for the load balancer."""
    return success_response({'status': 'ok'}, message='Service healthy')


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse(
        build_envelope(success=False, code=ErrorCode.NOT_FOUND, message='Not found'),
        status=404,
    )


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse(
        build_envelope(success=False, code=ErrorCode.INTERNAL_ERROR, message='Internal server error'),
        status=500,
    )
