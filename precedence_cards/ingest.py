"""
Spreadsheet ingestion and record normalization.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import pandas


NAME_HEADER_KEYS = ("nombre", "name")
ROLE_HEADER_KEYS = ("cargo", "role", "position")
EXCEL_ENGINES = {
	".xlsx": "openpyxl",
	".xls": "xlrd",
}


@dataclasses.dataclass(frozen=True)
class Record:
	name: str
	role: str


#============================================
def normalize_cell(value: object) -> str:
	"""
	Normalize a spreadsheet cell into card text.

	Args:
		value: Raw cell value.

	Returns:
		Upper-cased text, or an empty string for blank cells.
	"""
	if value is None:
		return ""
	if isinstance(value, float) and pandas.isna(value):
		return ""
	text = str(value).strip()
	return " ".join(text.split()).upper()


#============================================
def normalize_record(name: object, role: object) -> Record:
	"""
	Build a normalized Record from raw cell values.
	"""
	return Record(name=normalize_cell(name), role=normalize_cell(role))


#============================================
def find_header(headers: list[str], keys: tuple[str, ...]) -> str | None:
	"""
	Find the first header containing any key, case-insensitive.

	Args:
		headers: Column headers in sheet order.
		keys: Substrings to look for, in priority order.

	Returns:
		Matching header or None.
	"""
	for key in keys:
		for header in headers:
			if key in str(header).lower():
				return header
	return None


#============================================
def detect_columns(headers: list[str]) -> tuple[str, str]:
	"""
	Pick the name and role columns from the sheet headers.

	Args:
		headers: Column headers in sheet order.

	Returns:
		Tuple of (name_header, role_header).
	"""
	name_header = find_header(headers, NAME_HEADER_KEYS)
	role_header = find_header(headers, ROLE_HEADER_KEYS)
	if name_header is not None and role_header is not None and name_header != role_header:
		return (name_header, role_header)
	if len(headers) == 2:
		print("Name/role headers not detected, using the first two columns")
		return (headers[0], headers[1])
	raise ValueError(
		"Could not find name and role columns. Expected headers containing "
		f"'nombre'/'name' and 'cargo'/'role', or exactly two columns. Columns: {headers}"
	)


#============================================
def read_table(path: pathlib.Path, sheet: str | int = 0) -> pandas.DataFrame:
	"""
	Read a spreadsheet or CSV file into a DataFrame of strings.

	Args:
		path: Input file path.
		sheet: Sheet name or index for Excel files.

	Returns:
		DataFrame with stripped string headers.
	"""
	suffix = path.suffix.lower()
	if suffix in EXCEL_ENGINES:
		frame = pandas.read_excel(path, sheet_name=sheet, dtype=str, engine=EXCEL_ENGINES[suffix])
	elif suffix == ".csv":
		frame = pandas.read_csv(path, dtype=str)
	else:
		raise ValueError(f"Unsupported input file type: {path.name}")
	frame.columns = [str(column).strip() for column in frame.columns]
	return frame


#============================================
def records_from_frame(frame: pandas.DataFrame) -> list[Record]:
	"""
	Convert a DataFrame into normalized records, preserving row order.

	Args:
		frame: Input DataFrame.

	Returns:
		List of Record entries.
	"""
	if frame.empty:
		raise ValueError("Input sheet is empty")
	headers = list(frame.columns)
	name_header, role_header = detect_columns(headers)
	print(f"Using columns: name -> '{name_header}', role -> '{role_header}'")
	records: list[Record] = []
	for name, role in zip(frame[name_header], frame[role_header]):
		records.append(normalize_record(name, role))
	return records


#============================================
def load_records(path: pathlib.Path, sheet: str | int = 0) -> list[Record]:
	"""
	Load records from a spreadsheet.

	Args:
		path: Input .xlsx, .xls or .csv path.
		sheet: Sheet name or index for Excel files.

	Returns:
		List of Record entries.
	"""
	frame = read_table(path, sheet)
	return records_from_frame(frame)
