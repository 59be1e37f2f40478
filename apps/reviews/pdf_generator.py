"""
Reviewer certificate PDF.

Issued to a reviewer for a completed review. The manuscript title is
left out for double-blind submissions.
"""

from io import BytesIO
from xml.sax.saxutils import escape
from django.conf import settings
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer


class ReviewerCertificatePDFGenerator:
    """
    Generates the certificate of reviewing for one review.
    """

    def __init__(self, review):
        self.review = review
        self.width, self.height = landscape(A4)
        self.buffer = BytesIO()

    def _draw_border(self, canvas_obj, doc):
        canvas_obj.saveState()
        canvas_obj.setStrokeColor(colors.HexColor('#1e40af'))
        canvas_obj.setLineWidth(3)
        canvas_obj.rect(20*mm, 20*mm, self.width - 40*mm, self.height - 40*mm)
        canvas_obj.setStrokeColor(colors.HexColor('#60a5fa'))
        canvas_obj.setLineWidth(1)
        canvas_obj.rect(25*mm, 25*mm, self.width - 50*mm, self.height - 50*mm)
        canvas_obj.restoreState()

    def generate(self):
        """
        Build the certificate.

        Returns:
            BytesIO buffer containing the PDF
        """
        review = self.review
        submission = review.submission
        journal_name = settings.JOURNAL_DESK['JOURNAL_NAME']

        pdf = SimpleDocTemplate(
            self.buffer,
            pagesize=landscape(A4),
            rightMargin=30*mm,
            leftMargin=30*mm,
            topMargin=35*mm,
            bottomMargin=30*mm,
            title='Certificate of Reviewing',
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'CertificateTitle',
            parent=styles['Heading1'],
            fontSize=32,
            textColor=colors.HexColor('#1e40af'),
            alignment=TA_CENTER,
            fontName='Helvetica-Bold',
        )
        body_style = ParagraphStyle(
            'CertificateBody',
            parent=styles['Normal'],
            fontSize=14,
            leading=20,
            textColor=colors.HexColor('#4b5563'),
            alignment=TA_CENTER,
        )
        name_style = ParagraphStyle(
            'CertificateName',
            parent=styles['Normal'],
            fontSize=26,
            leading=32,
            textColor=colors.HexColor('#1f2937'),
            alignment=TA_CENTER,
            fontName='Helvetica-Bold',
        )
        footer_style = ParagraphStyle(
            'CertificateFooter',
            parent=styles['Normal'],
            fontSize=9,
            textColor=colors.HexColor('#9ca3af'),
            alignment=TA_CENTER,
        )

        elements = [
            Paragraph('Certificate of Reviewing', title_style),
            Spacer(1, 12*mm),
            Paragraph('This certificate is awarded to', body_style),
            Spacer(1, 6*mm),
            Paragraph(escape(review.reviewer.get_full_name()), name_style),
            Spacer(1, 8*mm),
            Paragraph(
                f'in recognition of a peer review completed for <b>{escape(journal_name)}</b>',
                body_style
            ),
        ]

        if not submission.is_double_blind:
            elements.append(Spacer(1, 4*mm))
            elements.append(Paragraph(f'<i>{escape(submission.title)}</i>', body_style))

        completed = review.submitted_at.strftime('%B %d, %Y') if review.submitted_at else ''
        elements.extend([
            Spacer(1, 10*mm),
            Paragraph(f'Completed on {completed}', body_style),
            Spacer(1, 12*mm),
            Paragraph(f'Certificate reference: {review.id}', footer_style),
        ])

        pdf.build(elements, onFirstPage=self._draw_border, onLaterPages=self._draw_border)
        self.buffer.seek(0)
        return self.buffer


def generate_reviewer_certificate(review):
    return ReviewerCertificatePDFGenerator(review).generate()
