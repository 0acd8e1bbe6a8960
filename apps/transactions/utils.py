import openpyxl
from io import BytesIO
from openpyxl.styles import Font

EXPORT_HEADERS = ['Date', 'Type', 'Category', 'Amount', 'Description', 'Receipt']
# user-entered text; never let openpyxl treat a leading '=' as a formula
TEXT_COLUMNS = (3, 5, 6)


def export_transactions_to_excel(queryset, currency='USD'):
    """
    Write transactions to a one-sheet .xlsx workbook

    Amounts stay numeric (2 decimals) so the sheet can be summed.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Transactions"

    ws.append(EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for tx in queryset:
        row = [
            tx.date,
            tx.get_type_display(),
            tx.category_name,
            float(tx.amount),  # excel has no Decimal
            tx.description or '',
            tx.receipt.name if tx.receipt else '',
        ]
        ws.append(row)
        ws.cell(row=ws.max_row, column=1).number_format = 'yyyy-mm-dd'
        ws.cell(row=ws.max_row, column=4).number_format = '#,##0.00'
        for column in TEXT_COLUMNS:
            ws.cell(row=ws.max_row, column=column).data_type = 's'

    ws.column_dimensions['A'].width = 12
    ws.column_dimensions['C'].width = 24
    ws.column_dimensions['D'].width = 14
    ws.column_dimensions['E'].width = 40
    # currency goes in a note row below the data
    ws.append([])
    ws.append([f'Amounts in {currency}'])

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
