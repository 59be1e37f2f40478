"""
JSON renderer that wraps successful payloads in the response envelope.
"""
from rest_framework.renderers import JSONRenderer


class EnvelopeJSONRenderer(JSONRenderer):
    """
    Wrap plain payloads as ``{"success": true, "data": ...}``.

    Payloads that already carry a ``success`` key (errors from the
    exception handler, paginated lists, views adding a ``message``) are
    rendered unchanged.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        if response is not None and response.status_code == 204:
            return b''

        if not (isinstance(data, dict) and 'success' in data):
            succeeded = response is None or response.status_code < 400
            if succeeded:
                data = {'success': True, 'data': data}
            else:
                data = {'success': False, 'error': str(data)}

        return super().render(data, accepted_media_type, renderer_context)
