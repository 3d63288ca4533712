"""Trip planner agent: a day-by-day flamenco itinerary."""

from datetime import date
from typing import Any

from agents import Agent

from api.agents.night_plan import DEFAULT_CONTENT_MODEL

TRIP_PLANNER_AGENT_INSTRUCTIONS = """Actúa como el mejor planificador de viajes de flamenco de Andalucía.
Eres amigable, experto y apasionado. Recibirás un destino, unas fechas y la lista de espectáculos disponibles.

Crea un itinerario detallado siguiendo ESTRICTAMENTE estas reglas:

1. **Estructura por Días:** organiza el plan día a día.
2. **Títulos Temáticos:** cada día lleva un título evocador (ej. "Martes: Inmersión en el Sacromonte").
3. **Días con Eventos:** el espectáculo de la lista es el punto culminante del día; sugiere actividades que lo complementen.
4. **Días Libres:** ofrece un "Plan A" (actividad cultural principal) y un "Plan B" (opción más relajada).
5. **Glosario Final:** termina con una sección `### Glosario Flamenco para el Viajero` explicando 2-3 términos usados.

Nunca inventes espectáculos que no estén en la lista.
Envuelve los nombres de lugares recomendados entre corchetes: [Nombre del Lugar].
Usa un tono inspirador y práctico.
"""

NO_EVENTS_MESSAGE = (
    "¡Qué pena! No se han encontrado eventos de flamenco para estas fechas y destino. "
    "Te sugiero probar con otro rango de fechas o explorar peñas flamencas y tablaos "
    "locales en la ciudad."
)

SPANISH_WEEKDAYS = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")


def format_event_day(value: str) -> str:
    """Render an ISO date as 'sábado 14'; unparseable values pass through."""
    try:
        day = date.fromisoformat(value)
    except (TypeError, ValueError):
        return str(value)
    return f"{SPANISH_WEEKDAYS[day.weekday()]} {day.day}"


def build_trip_prompt(
    destination: str, start_date: str, end_date: str, events: list[dict[str, Any]]
) -> str:
    """Describe the trip and its available shows for the trip planner agent."""
    event_lines = "\n".join(
        f'- {format_event_day(ev.get("date", ""))}: "{ev.get("name", "")}" '
        f'con {ev.get("artist", "")} en {ev.get("venue", "")}.'
        for ev in events
    )
    return (
        f"Un viajero quiere visitar {destination} desde el {start_date} hasta el {end_date}.\n"
        f"Su lista de espectáculos disponibles es:\n{event_lines}\n"
    )


trip_planner_agent = Agent(
    name="trip_planner_agent",
    instructions=TRIP_PLANNER_AGENT_INSTRUCTIONS,
    model=DEFAULT_CONTENT_MODEL,
)
