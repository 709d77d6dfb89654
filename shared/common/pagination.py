# shared/common/pagination.py
"""
Pagination for booking, court and payment listings.
"""

from collections import OrderedDict
from typing import Any

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """
    Page number pagination sized from REST_FRAMEWORK settings.

    Clients may ask for up to BOOKING_MAX_PAGE_SIZE rows per page.
    """

    page_size_query_param = 'page_size'
    page_query_param = 'page'

    @property
    def max_page_size(self) -> int:
        return getattr(settings, 'BOOKING_MAX_PAGE_SIZE', 100)

    def get_paginated_response(self, data: Any) -> Response:
        paginator = self.page.paginator
        return Response(OrderedDict([
            ('success', True),
            ('count', paginator.count),
            ('total_pages', paginator.num_pages),
            ('current_page', self.page.number),
            ('page_size', self.get_page_size(self.request)),
            ('has_next', self.page.has_next()),
            ('next', self.get_next_link()),
            ('previous', self.get_previous_link()),
            ('results', data),
        ]))
