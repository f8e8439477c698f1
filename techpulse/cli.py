# techpulse/cli.py
import logging
import sys

import click
from dotenv import load_dotenv

from techpulse.briefing import BriefingUnavailableError
from techpulse.factory import build_briefing_service, build_dispatcher
from techpulse.router.config_loader import load_dispatch_defaults
from techpulse.router.response_parser import BriefingParseError


# Carga .env una sola vez, antes que cualquier otra cosa
load_dotenv()


# ------------------------------------------------------------------
# Grupo raíz
# ------------------------------------------------------------------

@click.group()
@click.version_option(package_name="techpulse")
@click.option("--config", "config_path", default=None, help="Ruta a config.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Logging en nivel DEBUG")
@click.pass_context
def main(ctx, config_path, verbose):
    """
    TechPulse: briefing diario de noticias tecnológicas.

    Genera contenido con IA probando los modelos configurados en orden
    de prioridad hasta que uno responde.
    """
    logging.basicConfig(
        level  = logging.DEBUG if verbose else logging.INFO,
        format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ------------------------------------------------------------------
# techpulse generate
# ------------------------------------------------------------------

@main.command()
@click.argument("prompt")
@click.option("--model", "-m", default=None, help="Modelo preferido (se intenta primero)")
@click.option("--system", "system_prompt", default=None, help="System prompt opcional")
@click.option("--max-tokens", type=int, default=None, help="Máximo de tokens de salida")
@click.option("--temperature", type=float, default=None)
@click.option("--top-p", type=float, default=None)
@click.pass_context
def generate(ctx, prompt, model, system_prompt, max_tokens, temperature, top_p):
    """Genera texto con failover entre modelos."""
    if not prompt.strip():
        _abort("El prompt no puede estar vacío.")

    config_path = ctx.obj["config_path"]
    dispatcher  = _build_dispatcher_or_abort(config_path)
    config      = load_dispatch_defaults(config_path).to_call_config(
        model         = model,
        system_prompt = system_prompt,
        max_tokens    = max_tokens,
        temperature   = temperature,
        top_p         = top_p,
    )

    result = dispatcher.dispatch(prompt, config)
    if not result.success:
        _error(result.error)
        sys.exit(2)

    click.echo(result.content)
    click.echo(click.style(f"[techpulse] modelo: {result.model}", dim=True), err=True)


# ------------------------------------------------------------------
# techpulse briefing
# ------------------------------------------------------------------

@main.command()
@click.option(
    "--date", "day",
    default = None,
    type    = click.DateTime(formats=["%Y-%m-%d"]),
    help    = "Fecha del briefing (YYYY-MM-DD). Por defecto, hoy (UTC).",
)
@click.pass_context
def briefing(ctx, day):
    """Genera el briefing diario de noticias."""
    config_path = ctx.obj["config_path"]
    dispatcher  = _build_dispatcher_or_abort(config_path)
    service     = build_briefing_service(dispatcher, config_path)

    try:
        result = service.generate(day.date() if day else None)

    except BriefingUnavailableError as e:
        _error(f"Sin modelos disponibles. {e}")
        sys.exit(2)

    except BriefingParseError as e:
        _error(str(e))
        sys.exit(1)

    _print_briefing(result)


# ------------------------------------------------------------------
# techpulse models
# ------------------------------------------------------------------

@main.command()
@click.pass_context
def models(ctx):
    """Muestra el orden de prioridad de los modelos configurados."""
    dispatcher = _build_dispatcher_or_abort(ctx.obj["config_path"])
    for i, name in enumerate(dispatcher.candidate_order(), start=1):
        click.echo(f"[techpulse] {i}. {name}")


# ------------------------------------------------------------------
# techpulse serve
# ------------------------------------------------------------------

@main.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.pass_context
def serve(ctx, host, port):
    """Arranca la API HTTP."""
    import uvicorn
    from techpulse.factory import build_app

    try:
        app = build_app(ctx.obj["config_path"])
    except (FileNotFoundError, RuntimeError) as e:
        _abort(str(e))

    uvicorn.run(app, host=host, port=port)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _build_dispatcher_or_abort(config_path):
    try:
        return build_dispatcher(config_path)
    except FileNotFoundError as e:
        _abort(str(e))
    except RuntimeError as e:
        _abort(str(e))


def _print_briefing(result) -> None:
    click.echo("")
    click.echo("─" * 50)
    click.echo(f"[techpulse] Briefing {result.date} ({result.model})")
    click.echo("─" * 50)

    if not result.items:
        click.echo(click.style("[techpulse] ⚠ El modelo no devolvió noticias", fg="yellow"))

    for i, item in enumerate(result.items, start=1):
        click.echo(f"{i}. [{item['category']}] {item['headline']}")
        if item["summary"]:
            click.echo(f"   {item['summary']}")
    click.echo("─" * 50)


def _abort(message: str) -> None:
    """Error de validación o configuración, culpa del usuario."""
    click.echo(click.style(f"[techpulse] Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _error(message: str) -> None:
    """Error de sistema, no es culpa del usuario."""
    click.echo(click.style(f"[techpulse] {message}", fg="red"), err=True)
