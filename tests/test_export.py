from datetime import date, datetime

from taskops.export import CSV_HEADERS, export_filename, tasks_to_csv

from fakes import make_task


def test_header_only_for_no_tasks():
    assert tasks_to_csv([]) == "Task Name,Description,Client,Assistant,BOH,FOH,Created At"
    assert len(CSV_HEADERS) == 7


def test_quotes_are_doubled_inside_wrapped_fields():
    tasks = [
        make_task(1, "Book a plumber", 'Ask for "Dave"', client="Harper", assistant="Amira", foh=True,
                  created_at=datetime(2024, 5, 15, 9, 5, 42)),
        make_task(2, "Research hotel options", "Lisbon, 3 nights", client="Okafor", assistant="Ben", boh=True),
    ]
    lines = tasks_to_csv(tasks).split("\n")
    assert len(lines) == 3
    assert lines[1] == '"Book a plumber","Ask for ""Dave""","Harper","Amira",No,Yes,2024-05-15 09:05'
    assert lines[2] == '"Research hotel options","Lisbon, 3 nights","Okafor","Ben",Yes,No,'


def test_no_trailing_newline():
    assert not tasks_to_csv([make_task(1, "x")]).endswith("\n")


def test_empty_text_fields_are_still_quoted():
    line = tasks_to_csv([make_task(1)]).split("\n")[1]
    assert line == '"","","","",No,No,'


def test_export_filename():
    assert export_filename("ops-tasks", date(2024, 5, 15)) == "ops-tasks-2024-05-15.csv"
