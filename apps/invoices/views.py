"""
Invoice endpoints.

  GET /invoices/<uuid>/pdf/   PDF receipt (client, barber of the chair, or admin)
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import HttpResponse
from django.template.loader import get_template
from django.views.decorators.http import require_GET
from xhtml2pdf import pisa

from apps.accounts.decorators import login_required_json
from apps.accounts.permissions import Action, require_permission
from apps.core.exceptions import NotFoundError
from apps.core.http import api_view

from .models import Invoice
from .receipts import get_receipt_context

logger = logging.getLogger(__name__)


def _get_invoice(invoice_id) -> Invoice:
    try:
        return Invoice.objects.select_related(
            'appointment', 'appointment__service', 'appointment__barber',
        ).get(pk=invoice_id)
    except (Invoice.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError(f'Invoice {invoice_id} not found.')


@require_GET
@login_required_json
@api_view
def invoice_pdf(request, invoice_id):
    """Generates and downloads the PDF receipt for an invoice."""
    invoice = _get_invoice(invoice_id)
    require_permission(request.principal, Action.VIEW, invoice.appointment)

    html = get_template('invoices/receipt_pdf.html').render(get_receipt_context(invoice))

    response = HttpResponse(content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{invoice.invoice_number}.pdf"'

    pisa_status = pisa.CreatePDF(html, dest=response)
    if pisa_status.err:
        logger.error('PDF rendering failed for invoice %s', invoice.invoice_number)
        return HttpResponse('Could not render the receipt.', status=500)
    return response
