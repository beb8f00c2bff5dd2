"""Example: drive the service layer directly (no Flask).

Controllers are thin; the rules live in the services.
"""

from datetime import date

from src.class_attendance.class_attendance.core.enums import Weekday
from src.class_attendance.class_attendance.container import build_container
from src.class_attendance.class_attendance.storage.local_store import InMemoryKeyValueStore
from src.class_attendance.class_attendance.storage.remote_store import InMemoryRemoteDocumentStore
from src.class_attendance.class_attendance.users.identity import InMemoryIdentity


def main():
    container = build_container(
        local_store=InMemoryKeyValueStore(),
        remote_store=InMemoryRemoteDocumentStore(),
        identity=InMemoryIdentity(),
    )
    try:
        container.settings_service.update(period_duration_minutes=45, per_weekday={"Mon": 4})
        maths = container.subject_service.add("Maths")

        container.timetable_service.add_class(Weekday.MON, subject_id=maths.subject_id, start_period=1, duration=2)

        monday = date(2026, 1, 5)
        view = container.attendance_service.periods_for_date(monday)
        marks = {row.key.encode(): "present" for row in view.rows}
        container.attendance_service.submit_day(monday, marks)

        dashboard = container.stats_service.dashboard()
        print(dashboard.overall.to_dict())
        for subject in dashboard.subjects:
            print(subject.to_dict())

        prediction, message = container.stats_service.predict(2, 3)
        print(prediction.percentage, message)
    finally:
        container.background.stop()


if __name__ == "__main__":
    main()
