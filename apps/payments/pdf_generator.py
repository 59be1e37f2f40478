"""
Invoice PDF for APC payments.
"""

from io import BytesIO
from xml.sax.saxutils import escape
from django.conf import settings
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_RIGHT
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle


class InvoicePDFGenerator:
    """
    Generates the APC invoice for a payment.
    """

    def __init__(self, payment):
        self.payment = payment
        self.buffer = BytesIO()

    def generate(self):
        payment = self.payment
        submission = payment.submission
        payer = payment.user
        journal_name = settings.JOURNAL_DESK['JOURNAL_NAME']

        pdf = SimpleDocTemplate(
            self.buffer,
            pagesize=A4,
            rightMargin=20*mm,
            leftMargin=20*mm,
            topMargin=20*mm,
            bottomMargin=20*mm,
            title=f'Invoice {payment.invoice_number}',
        )

        styles = getSampleStyleSheet()
        heading = ParagraphStyle(
            'InvoiceHeading',
            parent=styles['Heading1'],
            textColor=colors.HexColor('#1e40af'),
        )
        right = ParagraphStyle('InvoiceRight', parent=styles['Normal'], alignment=TA_RIGHT)
        normal = styles['Normal']

        issued = payment.created_at.strftime('%d %B %Y')
        elements = [
            Paragraph(escape(journal_name), heading),
            Paragraph(f'<b>INVOICE</b> {escape(payment.invoice_number)}', right),
            Paragraph(f'Issued: {issued}', right),
            Paragraph(f'Status: {payment.get_status_display()}', right),
            Spacer(1, 10*mm),
            Paragraph('<b>Billed to</b>', normal),
            Paragraph(escape(payer.get_full_name()), normal),
            Paragraph(escape(payer.affiliation or ''), normal),
            Paragraph(escape(payer.email), normal),
            Spacer(1, 10*mm),
        ]

        rows = [
            ['Description', 'Amount'],
            [
                Paragraph(f'Article processing charge<br/><i>{escape(submission.title)}</i>', normal),
                f'{payment.amount} {payment.currency}',
            ],
            ['Total', f'{payment.amount} {payment.currency}'],
        ]
        table = Table(rows, colWidths=[120*mm, 40*mm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1e40af')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LINEBELOW', (0, 0), (-1, -2), 0.5, colors.HexColor('#d1d5db')),
        ]))
        elements.append(table)

        if payment.paid_at:
            elements.append(Spacer(1, 8*mm))
            paid = payment.paid_at.strftime('%d %B %Y')
            reference = f' (ref. {escape(payment.transaction_id)})' if payment.transaction_id else ''
            elements.append(Paragraph(f'Paid on {paid}{reference}', normal))

        pdf.build(elements)
        self.buffer.seek(0)
        return self.buffer


def generate_invoice_pdf(payment):
    return InvoicePDFGenerator(payment).generate()
