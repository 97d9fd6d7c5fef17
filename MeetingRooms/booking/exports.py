"""
Booking exports: CSV, Excel and PDF renderings of a list of bookings.

Each exporter takes an iterable of bookings and returns an HttpResponse
ready to be sent as a download.
"""
import csv
import io

from django.http import HttpResponse
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

HEADERS = ['Room', 'Title', 'Start', 'End', 'Booked by', 'Booked for', 'Description']

CONTENT_TYPES = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'pdf': 'application/pdf',
}


def _local(value):
    return timezone.localtime(value).strftime('%Y-%m-%d %H:%M')


def booking_rows(bookings):
    for booking in bookings:
        yield [
            booking.room_name,
            booking.title,
            _local(booking.start),
            _local(booking.end),
            booking.booked_by,
            booking.booked_for,
            booking.description,
        ]


def _download(fmt, filename):
    response = HttpResponse(content_type=CONTENT_TYPES[fmt])
    response['Content-Disposition'] = f'attachment; filename="{filename}.{fmt}"'
    return response


def export_csv(bookings, filename='bookings'):
    response = _download('csv', filename)
    writer = csv.writer(response)
    writer.writerow(HEADERS)
    for row in booking_rows(bookings):
        writer.writerow(row)
    return response


def export_excel(bookings, filename='bookings'):
    wb = Workbook()
    ws = wb.active
    ws.title = "Bookings"

    ws['A1'] = "ROOM BOOKINGS"
    ws['A1'].font = Font(bold=True, size=16, color="366092")
    ws['A2'] = f"Generated: {timezone.localtime().strftime('%Y-%m-%d %H:%M')}"

    header_row = 4
    for col, header in enumerate(HEADERS, start=1):
        cell = ws.cell(row=header_row, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = PatternFill(start_color="5B9BD5", end_color="5B9BD5", fill_type="solid")
        cell.alignment = Alignment(horizontal='center')

    for row, values in enumerate(booking_rows(bookings), start=header_row + 1):
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)

    # Auto-adjust column widths, skipping the title rows
    for column in ws.iter_cols(min_row=header_row):
        max_length = max((len(str(cell.value)) for cell in column if cell.value), default=0)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 40)

    response = _download('xlsx', filename)
    wb.save(response)
    return response


def export_pdf(bookings, filename='bookings'):
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(letter), topMargin=0.5 * inch, bottomMargin=0.5 * inch)
    styles = getSampleStyleSheet()

    story = [
        Paragraph("Room Bookings", styles['Title']),
        Paragraph(f"Generated: {timezone.localtime().strftime('%Y-%m-%d %H:%M')}", styles['Normal']),
        Spacer(1, 0.25 * inch),
    ]

    cell_style = styles['BodyText']
    data = [HEADERS]
    for values in booking_rows(bookings):
        data.append([Paragraph(str(value), cell_style) if value else '' for value in values])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#5B9BD5')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F2F2F2')]),
    ]))
    story.append(table)
    doc.build(story)

    response = _download('pdf', filename)
    response.write(buffer.getvalue())
    return response


EXPORTERS = {
    'csv': export_csv,
    'xlsx': export_excel,
    'pdf': export_pdf,
}
