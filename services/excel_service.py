from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from schemas.reports import MonthlyClassReport, StudentAttendanceSummary

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="FFE6E6FA", end_color="FFE6E6FA", fill_type="solid")


class ExcelService:
    def _write_header(self, sheet, columns):
        """columns: [(title, width), ...] written to row 1"""
        for idx, (title, width) in enumerate(columns, 1):
            cell = sheet.cell(1, idx, title)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            sheet.column_dimensions[get_column_letter(idx)].width = width

    def _write_footer(self, sheet, pairs):
        row = sheet.max_row + 2
        for label, value in pairs:
            sheet.cell(row, 1, label).font = HEADER_FONT
            sheet.cell(row, 2, value).font = HEADER_FONT
            row += 1

    def _to_bytes(self, wb: Workbook) -> bytes:
        buf = BytesIO()
        wb.save(buf)
        return buf.getvalue()

    def monthly_class_report(self, report: MonthlyClassReport) -> bytes:
        """Monthly class report, one row per student"""
        wb = Workbook()
        sheet = wb.active
        # sheet titles are capped at 31 chars and may not contain / \ ? * [ ] :
        title = f"{report.subject or 'All'} - {report.month}"
        sheet.title = "".join(ch for ch in title if ch not in "/\\?*[]:")[:31]

        self._write_header(sheet, [
            ("PIN", 14), ("Name", 30), ("Working Days", 15),
            ("Present", 12), ("Absent", 12), ("%", 10),
        ])
        for row in report.students:
            sheet.append([
                row.pin, row.name, report.working_days,
                row.present_days, row.absent_days, row.percentage,
            ])

        self._write_footer(sheet, [
            ("Total Working Days:", report.working_days),
            ("Subject:", report.subject or "All subjects"),
            ("Month:", report.month),
            ("Generated By:", "Faculty Log Book System"),
        ])
        return self._to_bytes(wb)

    def student_attendance(self, student, summary: StudentAttendanceSummary) -> bytes:
        """Student view: monthly sheet plus a day-by-day sheet"""
        wb = Workbook()
        monthly = wb.active
        monthly.title = "Monthly"
        self._write_header(monthly, [
            ("Month", 20), ("Total Days", 12), ("Present Days", 14), ("%", 10),
        ])
        for m in summary.monthly_breakdown:
            monthly.append([m.month, m.total_days, m.present_days, m.percentage])
        self._write_footer(monthly, [
            ("PIN:", student.pin),
            ("Name:", student.name),
            ("Semester:", student.semester),
            ("Shift:", student.shift),
            ("Overall %:", summary.overall_percentage),
        ])

        daily = wb.create_sheet("Daily")
        self._write_header(daily, [
            ("Date", 14), ("Periods", 10), ("Present Periods", 16), ("Status", 12),
        ])
        for d in summary.daily_records:
            daily.append([d.day.isoformat(), d.total_periods, d.present_periods, d.status.title()])
        return self._to_bytes(wb)
