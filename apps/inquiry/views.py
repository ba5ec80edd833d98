from django.http import JsonResponse
from django.views.decorators.http import require_POST

from . import services


@require_POST
def inquiry_submit(request):
    """
    Form-encoded submission from a storefront product page (AJAX).
    CSRF-protected like any Django form; answers in the same shape as the API.
    """
    result = services.submit_inquiry(request.POST)
    if result.ok:
        status = 200
    elif result.retryable:
        status = 503
    else:
        status = 400
    return JsonResponse(result.as_dict(), status=status)
