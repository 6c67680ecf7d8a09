"""
Spreadsheet export
Stock cards, movement history and the catalog import template
"""
from io import BytesIO
from datetime import date, datetime
from typing import List, Dict, Any

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter


class ExportService:
    """Excel export"""

    @staticmethod
    def export_to_excel(
        data: List[Dict[str, Any]],
        columns: List[Dict[str, str]],
        sheet_name: str = "Sheet1",
        title: str = None
    ) -> BytesIO:
        """
        Write rows to an xlsx workbook.

        Args:
            data: rows [{"field1": value1, ...}, ...]
            columns: column definitions [{"field": "field1", "header": "Field 1", "width": 15}, ...]
            sheet_name: worksheet name
            title: optional banner row above the header

        Returns:
            BytesIO positioned at 0
        """
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = sheet_name

        header_font = Font(size=11, bold=True, color='FFFFFF')
        header_fill = PatternFill(start_color='0F766E', end_color='0F766E', fill_type='solid')
        border = Border(
            left=Side(style='thin', color='E5E7EB'),
            right=Side(style='thin', color='E5E7EB'),
            top=Side(style='thin', color='E5E7EB'),
            bottom=Side(style='thin', color='E5E7EB')
        )

        header_row = 1
        if title:
            ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(columns))
            title_cell = ws.cell(row=1, column=1, value=title)
            title_cell.font = Font(size=14, bold=True)
            title_cell.alignment = Alignment(horizontal='center', vertical='center')
            ws.row_dimensions[1].height = 26
            header_row = 2

        for col_idx, col_def in enumerate(columns, start=1):
            cell = ws.cell(row=header_row, column=col_idx, value=col_def['header'])
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = border
            ws.column_dimensions[get_column_letter(col_idx)].width = col_def.get('width', 15)

        for row_idx, row_data in enumerate(data, start=header_row + 1):
            for col_idx, col_def in enumerate(columns, start=1):
                value = row_data.get(col_def['field'], '')
                if isinstance(value, datetime):
                    value = value.strftime('%Y-%m-%d %H:%M:%S')
                elif isinstance(value, date):
                    value = value.isoformat()
                elif value is None:
                    value = ''

                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = border
                if isinstance(value, (int, float)):
                    cell.alignment = Alignment(horizontal='right')

        ws.freeze_panes = ws.cell(row=header_row + 1, column=1)

        output = BytesIO()
        wb.save(output)
        output.seek(0)
        return output

    @staticmethod
    def stock_card_workbook(item, card, start=None, end=None) -> BytesIO:
        """Stock card (opening row, movements oldest first, closing row)"""
        rows = [{'date': start or 'All Time', 'reference': 'Opening Balance', 'note': '',
                 'in': '', 'out': '', 'balance': card.opening_balance}]
        for row in reversed(card.rows):
            rows.append({
                'date': row.date,
                'reference': row.reference or row.movement_id,
                'note': row.note,
                'in': row.signed_delta if row.signed_delta > 0 else '',
                'out': -row.signed_delta if row.signed_delta < 0 else '',
                'balance': row.balance_after,
            })
        rows.append({'date': end or 'Today', 'reference': 'Closing Balance', 'note': '',
                     'in': card.total_in, 'out': card.total_out, 'balance': card.closing_balance})

        columns = [
            {'field': 'date', 'header': 'Date', 'width': 12},
            {'field': 'reference', 'header': 'Reference', 'width': 20},
            {'field': 'note', 'header': 'Note', 'width': 30},
            {'field': 'in', 'header': 'In', 'width': 10},
            {'field': 'out', 'header': 'Out', 'width': 10},
            {'field': 'balance', 'header': 'Balance', 'width': 12},
        ]
        return ExportService.export_to_excel(
            rows, columns, sheet_name='Stock Card', title=f"Stock Card {item.sku} - {item.name}"
        )

    @staticmethod
    def movements_workbook(movements) -> BytesIO:
        """Movement history, one row per line"""
        rows = []
        for movement in movements:
            for line in movement.lines:
                rows.append({
                    'id': movement.id,
                    'date': movement.date,
                    'direction': movement.direction,
                    'reference': movement.reference_number,
                    'sku': line.sku,
                    'name': line.name,
                    'qty': line.order_quantity,
                    'unit': line.unit_name,
                    'total': line.base_units,
                })
        columns = [
            {'field': 'id', 'header': 'Transaction', 'width': 16},
            {'field': 'date', 'header': 'Date', 'width': 12},
            {'field': 'direction', 'header': 'Type', 'width': 8},
            {'field': 'reference', 'header': 'Reference', 'width': 18},
            {'field': 'sku', 'header': 'SKU', 'width': 14},
            {'field': 'name', 'header': 'Item', 'width': 28},
            {'field': 'qty', 'header': 'Qty', 'width': 8},
            {'field': 'unit', 'header': 'Unit', 'width': 12},
            {'field': 'total', 'header': 'Total', 'width': 10},
        ]
        return ExportService.export_to_excel(rows, columns, sheet_name='Transactions')

    @staticmethod
    def import_template(columns, sample_rows) -> BytesIO:
        return ExportService.export_to_excel(
            sample_rows,
            [{'field': c, 'header': c, 'width': 18} for c in columns],
            sheet_name='Template'
        )
