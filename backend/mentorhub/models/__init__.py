from .setting import Setting
from .mentor import Mentor
from .student import Student
from .season import Season
from .shift_template import ShiftTemplate
from .shift import Shift
from .signup import Signup
from .hour_adjustment import HourAdjustment
from .student_attendance import StudentAttendance

__all__ = [
    "Setting",
    "Mentor",
    "Student",
    "Season",
    "ShiftTemplate",
    "Shift",
    "Signup",
    "HourAdjustment",
    "StudentAttendance",
]
