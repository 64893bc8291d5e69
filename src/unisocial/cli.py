"""CLI interface for the Unisocial campus client"""

import asyncio
import json
import logging
import sys
from contextlib import contextmanager
from typing import List

import click
import requests
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .chat_view_formatter import ChatViewFormatter
from .client import UnisocialClient
from .comment_thread import CommentThread
from .comment_view_formatter import CommentViewFormatter, ViewContext, format_relative_time
from .config import Settings, clear_saved_token, load_settings, save_token
from .errors import ApiError, UnauthorizedError, UnisocialError
from .models import Club, ClubMembership, CreateEventRequest, Event, EventUpdate, Post
from .poller import Poller

console = Console()


@contextmanager
def api_errors():
    """Print client errors in red and exit with status 1"""
    try:
        yield
    except UnauthorizedError:
        console.print("[red]Not logged in or session expired.[/red]")
        console.print("[yellow]Run 'unisocial login' first.[/yellow]")
        sys.exit(1)
    except ApiError as e:
        console.print(f"[red]Request failed: {e}[/red]", markup=True, highlight=False)
        sys.exit(1)
    except (UnisocialError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except requests.RequestException as e:
        console.print(f"[red]Could not reach the server: {e}[/red]")
        sys.exit(1)


def _client(ctx: click.Context) -> UnisocialClient:
    settings: Settings = ctx.obj["settings"]
    return UnisocialClient(settings)


def _run_poller(poller: Poller) -> None:
    try:
        asyncio.run(poller.run())
    except KeyboardInterrupt:
        poller.stop()
        console.print("\n[dim]Stopped watching.[/dim]")


def _posts_table(posts: List[Post], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Post", justify="right", style="cyan")
    table.add_column("Author")
    table.add_column("Text", overflow="fold")
    table.add_column("Likes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("When")

    for post in posts:
        liked = " ♥" if post.liked_by_current_user else ""
        table.add_row(
            str(post.id),
            post.author_name or "-",
            post.content_text,
            f"{post.like_count}{liked}",
            str(post.comment_count),
            format_relative_time(post.created_at),
        )
    return table


def _clubs_table(club_list: List[Club], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Club", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Members", justify="right")
    table.add_column("Status")

    for club in club_list:
        status = "[green]verified[/green]" if club.verified else "[yellow]pending[/yellow]"
        table.add_row(
            str(club.id),
            club.name,
            club.category or "-",
            str(club.member_count) if club.member_count is not None else "-",
            status,
        )
    return table


def _events_table(event_list: List[Event], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Event", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Club")
    table.add_column("Starts")
    table.add_column("Location")
    table.add_column("OD")

    for event in event_list:
        starts = event.start_time.strftime("%Y-%m-%d %H:%M") if event.start_time else "-"
        table.add_row(
            str(event.id),
            event.title,
            event.club_name or "-",
            starts,
            event.location or "-",
            "yes" if event.od_provided else "no",
        )
    return table


def _members_table(memberships: List[ClubMembership], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Membership", justify="right", style="cyan")
    table.add_column("User")
    table.add_column("Club")
    table.add_column("Role")
    table.add_column("Status")
    table.add_column("Joined")

    for membership in memberships:
        table.add_row(
            str(membership.id),
            membership.user_name or f"#{membership.user_id}",
            membership.club_name or f"#{membership.club_id}",
            membership.role.value,
            membership.status.value,
            format_relative_time(membership.joined_at) if membership.joined_at else "-",
        )
    return table


@click.group()
@click.option('--api-url', help='Backend URL (overrides config and UNISOCIAL_API_URL)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, api_url, verbose):
    """Unisocial - campus feed, comments, chat, clubs and events from the terminal"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = load_settings(api_url=api_url)


# Authentication


@cli.command()
@click.pass_context
def ping(ctx):
    """Check that the backend is reachable"""
    client = _client(ctx)
    with api_errors():
        reply = client.test_connection()
    console.print(f"[green]✓ {client.base_url} is up[/green]")
    if reply:
        console.print(f"[dim]{reply}[/dim]", markup=True, highlight=False)


@cli.command()
@click.option('--email', '-e', prompt=True, help='Account email')
@click.option('--password', '-p', prompt=True, hide_input=True, help='Account password')
@click.pass_context
def login(ctx, email, password):
    """Log in and remember the session token

    Examples:
        \b
        unisocial login --email student@campus.edu
    """
    client = _client(ctx)
    with api_errors():
        auth = client.login(email, password)

    path = save_token(auth.token)
    name = auth.user.name if auth.user and auth.user.name else email
    console.print(f"[green]✓ Logged in as {name}[/green]")
    console.print(f"[dim]Token saved to {path}[/dim]")


@cli.command()
@click.option('--reg-no', prompt='Registration number', help='University registration number')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', '-e', prompt=True, help='Account email')
@click.option('--password', '-p', prompt=True, hide_input=True, confirmation_prompt=True, help='Account password')
@click.pass_context
def register(ctx, reg_no, name, email, password):
    """Create an account and log in"""
    client = _client(ctx)
    with api_errors():
        auth = client.register(reg_no, email, password, name)

    save_token(auth.token)
    console.print(f"[green]✓ Account created for {name}[/green]")


@cli.command()
def logout():
    """Forget the saved session token"""
    if clear_saved_token():
        console.print("[green]✓ Logged out[/green]")
    else:
        console.print("[dim]No saved session[/dim]")


@cli.command()
@click.pass_context
def whoami(ctx):
    """Show the logged-in user's profile"""
    client = _client(ctx)
    with api_errors():
        user = client.get_current_user()

    console.print(Panel.fit(
        f"[bold blue]{user.name or 'Unnamed'}[/bold blue]\n"
        f"Email: {user.email or '-'}\n"
        f"Reg no: {user.reg_no or '-'}\n"
        f"Role: {user.role.value}\n"
        f"Bio: {user.bio or '[dim]none[/dim]'}",
        border_style="blue"
    ))


# Profiles and users


@cli.group()
def profile():
    """View and edit profiles"""
    pass


@profile.command('show')
@click.argument('user_id', type=int)
@click.pass_context
def profile_show(ctx, user_id):
    """Show a user's profile and the clubs they belong to"""
    client = _client(ctx)
    with api_errors():
        user = client.get_user(user_id)
        memberships = client.get_user_clubs(user_id)

    clubs_line = ", ".join(m.club_name or f"#{m.club_id}" for m in memberships) or "none"
    console.print(Panel.fit(
        f"[bold blue]{user.name or 'Unnamed'}[/bold blue] (#{user.id})\n"
        f"Role: {user.role.value}\n"
        f"Bio: {user.bio or '-'}\n"
        f"Clubs: {clubs_line}",
        border_style="blue"
    ))


@profile.command('edit')
@click.option('--name', help='New display name')
@click.option('--bio', help='New bio')
@click.option('--dp-url', help='New profile picture URL')
@click.pass_context
def profile_edit(ctx, name, bio, dp_url):
    """Update your name, bio or profile picture"""
    if name is None and bio is None and dp_url is None:
        raise click.UsageError("Give at least one of --name, --bio, --dp-url")

    client = _client(ctx)
    with api_errors():
        user = client.update_profile(name=name, bio=bio, dp_url=dp_url)
    console.print(f"[green]✓ Profile updated for {user.name or user.email}[/green]")


@profile.command('memberships')
@click.argument('user_id', type=int)
@click.pass_context
def profile_memberships(ctx, user_id):
    """List every club membership of a user, pending ones included"""
    client = _client(ctx)
    with api_errors():
        memberships = client.get_user_memberships(user_id)

    if not memberships:
        console.print("[yellow]No memberships[/yellow]")
        return
    console.print(_members_table(memberships, f"Memberships of user #{user_id}"))


@cli.group()
def users():
    """Find other students"""
    pass


@users.command('search')
@click.argument('query')
@click.pass_context
def users_search(ctx, query):
    """Search users by name or email"""
    client = _client(ctx)
    with api_errors():
        found = client.search_users(query)

    if not found:
        console.print(f"[yellow]No users matching '{query}'[/yellow]")
        return

    table = Table(title=f"Users matching '{query}'", show_header=True, header_style="bold cyan")
    table.add_column("User", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Reg no")
    for user in found:
        table.add_row(str(user.id), user.name or "-", user.email or "-", user.reg_no or "-")
    console.print(table)


# Posts and comments


@cli.command()
@click.option('--user', 'user_id', type=int, help='Only posts by this user id')
@click.option('--club', 'club_id', type=int, help='Only posts by this club')
@click.option('--recommended', is_flag=True, help='Posts picked for you')
@click.pass_context
def feed(ctx, user_id, club_id, recommended):
    """Show the post feed"""
    client = _client(ctx)
    with api_errors():
        if recommended:
            posts = client.get_recommended_posts()
        elif club_id:
            posts = client.get_club_posts(club_id)
        elif user_id:
            posts = client.get_user_posts(user_id)
        else:
            posts = client.get_feed()

    if not posts:
        console.print("[yellow]No posts yet[/yellow]")
        return

    console.print(_posts_table(posts, "Recommended" if recommended else "Feed"))


@cli.command()
@click.argument('content')
@click.option('--media-url', help='URL of an already uploaded image or video')
@click.option('--media-type', type=click.Choice(['TEXT', 'IMAGE', 'VIDEO']), default='TEXT', help='Media type')
@click.option('--club', 'club_id', type=int, help='Post on behalf of this club (club admins)')
@click.pass_context
def post(ctx, content, media_url, media_type, club_id):
    """Publish a post

    Examples:
        \b
        unisocial post "Hackathon registrations are open!"
        unisocial post "Poster" --media-url https://cdn/x.png --media-type IMAGE --club 3
    """
    text = content.strip()
    if not text:
        raise click.UsageError("Post content is empty")

    client = _client(ctx)
    with api_errors():
        if club_id:
            created = client.create_club_post(club_id, text, media_url=media_url, media_type=media_type)
        else:
            created = client.create_post(text, media_url=media_url, media_type=media_type)
    console.print(f"[green]✓ Posted (#{created.id})[/green]")


@cli.command('delete-post')
@click.argument('post_id', type=int)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete_post(ctx, post_id, yes):
    """Delete one of your posts"""
    if not yes:
        click.confirm(f"Delete post #{post_id}?", abort=True)
    client = _client(ctx)
    with api_errors():
        client.delete_post(post_id)
    console.print(f"[green]✓ Deleted post #{post_id}[/green]")


@cli.command()
@click.argument('post_id', type=int)
@click.option('--watch', '-w', is_flag=True, help='Keep refreshing the thread')
@click.option('--interval', type=float, help='Refresh interval in seconds (with --watch)')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text', help='Output format')
@click.pass_context
def comments(ctx, post_id, watch, interval, output_format):
    """Show the threaded comments of a post

    Examples:
        \b
        # Show comments once
        unisocial comments 42

        \b
        # Follow the thread, refreshing every 5 seconds
        unisocial comments 42 --watch

        \b
        # Export the reconstructed tree
        unisocial comments 42 --format json
    """
    client = _client(ctx)
    thread = CommentThread(client, post_id)
    formatter = CommentViewFormatter()

    def render(forest):
        if output_format == 'json':
            data = [node.model_dump(mode="json", by_alias=True) for node in forest]
            click.echo(json.dumps(data, indent=2))
            return
        if watch:
            console.clear()
        console.print(formatter.format(forest, ViewContext(post_id=post_id)), markup=False, highlight=False)

    if not watch:
        with api_errors():
            render(thread.load())
        return

    settings: Settings = ctx.obj["settings"]
    poller = Poller(
        thread.load,
        interval or settings.comment_poll_interval,
        on_update=render,
        on_error=lambda e: console.print(f"[yellow]⚠ Refresh failed: {e}[/yellow]"),
    )
    _run_poller(poller)


@cli.command()
@click.argument('post_id', type=int)
@click.argument('content')
@click.option('--reply-to', type=int, help='Comment id to reply to')
@click.pass_context
def comment(ctx, post_id, content, reply_to):
    """Comment on a post, or reply to a comment

    Examples:
        \b
        unisocial comment 42 "Great event!"
        unisocial comment 42 "Agreed" --reply-to 7
    """
    client = _client(ctx)
    thread = CommentThread(client, post_id)

    with api_errors():
        thread.load()
        record = thread.submit(content, reply_to=reply_to)

    target = f"reply to #{reply_to}" if reply_to else "comment"
    console.print(f"[green]✓ Posted {target} (#{record.id})[/green]")
    console.print()
    view = CommentViewFormatter().format(thread.forest, ViewContext(post_id=post_id))
    console.print(view, markup=False, highlight=False)


@cli.command()
@click.argument('post_id', type=int)
@click.option('--undo', is_flag=True, help='Remove your like instead')
@click.pass_context
def like(ctx, post_id, undo):
    """Like (or unlike) a post"""
    client = _client(ctx)
    with api_errors():
        status = client.unlike_post(post_id) if undo else client.like_post(post_id)

    verb = "Unliked" if undo else "Liked"
    console.print(f"[green]✓ {verb} post #{post_id}[/green] ({status.total_likes} likes)")


@cli.command()
@click.argument('post_id', type=int)
@click.pass_context
def likes(ctx, post_id):
    """Show the like count of a post"""
    client = _client(ctx)
    with api_errors():
        status = client.get_post_likes(post_id)

    mine = " (including you)" if status.liked_by_current_user else ""
    console.print(f"Post #{post_id}: {status.total_likes} likes{mine}")


# Chat


@cli.group()
def chat():
    """Direct and club group messaging"""
    pass


@chat.command('rooms')
@click.option('--watch', '-w', is_flag=True, help='Keep refreshing the room list')
@click.pass_context
def chat_rooms(ctx, watch):
    """List your chat rooms with their latest message"""
    client = _client(ctx)
    formatter = ChatViewFormatter()

    def render(rooms):
        if watch:
            console.clear()
        if not rooms:
            console.print("[yellow]No chat rooms yet[/yellow]")
            return
        for room in rooms:
            console.print(formatter.format_room_line(room), markup=False, highlight=False)

    if not watch:
        with api_errors():
            render(client.get_chat_rooms())
        return

    settings: Settings = ctx.obj["settings"]
    _run_poller(Poller(client.get_chat_rooms, settings.rooms_poll_interval, on_update=render))


@chat.command('show')
@click.argument('room_id', type=int)
@click.option('--watch', '-w', is_flag=True, help='Keep refreshing the conversation')
@click.pass_context
def chat_show(ctx, room_id, watch):
    """Show the messages of a chat room"""
    client = _client(ctx)

    with api_errors():
        me = client.get_current_user()
        room = next((r for r in client.get_chat_rooms() if r.id == room_id), None)

    formatter = ChatViewFormatter(current_user_id=me.id)

    def render(messages):
        if watch:
            console.clear()
        console.print(formatter.format(messages, room), markup=False, highlight=False)

    if not watch:
        with api_errors():
            render(client.get_chat_messages(room_id))
        return

    settings: Settings = ctx.obj["settings"]
    _run_poller(Poller(lambda: client.get_chat_messages(room_id), settings.chat_poll_interval, on_update=render))


@chat.command('send')
@click.argument('room_id', type=int)
@click.argument('content')
@click.pass_context
def chat_send(ctx, room_id, content):
    """Send a message to a chat room"""
    text = content.strip()
    if not text:
        console.print("[red]Error: message is empty[/red]")
        sys.exit(1)

    client = _client(ctx)
    with api_errors():
        message = client.send_message(room_id, text)
    console.print(f"[green]✓ Sent (#{message.id})[/green]")


@chat.command('start')
@click.option('--user', 'user_id', type=int, help='Open a private chat with this user')
@click.option('--club', 'club_id', type=int, help='Open the group chat of this club')
@click.pass_context
def chat_start(ctx, user_id, club_id):
    """Open (or reuse) a private or club chat room"""
    if (user_id is None) == (club_id is None):
        raise click.UsageError("Give exactly one of --user or --club")

    client = _client(ctx)
    with api_errors():
        room = client.start_private_chat(user_id) if user_id is not None else client.start_group_chat(club_id)
    console.print(f"[green]✓ Room #{room.id} ready: {room.title}[/green]")
    console.print(f"[dim]unisocial chat show {room.id}[/dim]")


# Clubs


@cli.group(invoke_without_command=True)
@click.option('--verified/--unverified', default=None, help='Filter by verification state')
@click.option('--recommended', is_flag=True, help='Clubs picked for you')
@click.pass_context
def clubs(ctx, verified, recommended):
    """List clubs, or manage a club with a subcommand"""
    if ctx.invoked_subcommand is not None:
        return

    client = _client(ctx)
    with api_errors():
        club_list = client.get_recommended_clubs() if recommended else client.get_clubs(verified=verified)

    if not club_list:
        console.print("[yellow]No clubs found[/yellow]")
        return

    console.print(_clubs_table(club_list, "Recommended clubs" if recommended else "Clubs"))


@clubs.command('show')
@click.argument('club_id', type=int)
@click.pass_context
def clubs_show(ctx, club_id):
    """Show a club and your membership in it"""
    client = _client(ctx)
    with api_errors():
        club = client.get_club(club_id)
        status = client.get_membership_status(club_id)

    membership = status.status or "not a member"
    if status.role:
        membership += f" ({status.role})"
    console.print(Panel.fit(
        f"[bold blue]{club.name}[/bold blue] (#{club.id})\n"
        f"{club.description or ''}\n"
        f"Verified: {'yes' if club.verified else 'no'}\n"
        f"Members: {club.member_count if club.member_count is not None else '-'}\n"
        f"You: {membership}",
        border_style="blue"
    ))


@clubs.command('create')
@click.argument('name')
@click.option('--description', help='What the club is about')
@click.option('--logo-url', help='Logo image URL')
@click.pass_context
def clubs_create(ctx, name, description, logo_url):
    """Create a club (it needs admin approval before it is listed)"""
    client = _client(ctx)
    with api_errors():
        club = client.create_club(name, description=description, logo_url=logo_url)
    console.print(f"[green]✓ Club #{club.id} created[/green], waiting for admin approval")


@clubs.command('update')
@click.argument('club_id', type=int)
@click.option('--name', required=True, help='Club name')
@click.option('--description', help='What the club is about')
@click.option('--logo-url', help='Logo image URL')
@click.pass_context
def clubs_update(ctx, club_id, name, description, logo_url):
    """Edit a club's details (club admins)"""
    client = _client(ctx)
    with api_errors():
        club = client.update_club(club_id, name, description=description, logo_url=logo_url)
    console.print(f"[green]✓ Club #{club.id} updated[/green]")


@clubs.command('delete')
@click.argument('club_id', type=int)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def clubs_delete(ctx, club_id, yes):
    """Delete a club"""
    if not yes:
        click.confirm(f"Delete club #{club_id}?", abort=True)
    client = _client(ctx)
    with api_errors():
        client.delete_club(club_id)
    console.print(f"[green]✓ Club #{club_id} deleted[/green]")


@clubs.command('join')
@click.argument('club_id', type=int)
@click.pass_context
def clubs_join(ctx, club_id):
    """Request to join a club"""
    client = _client(ctx)
    with api_errors():
        client.join_club(club_id)
        status = client.get_membership_status(club_id)

    console.print(f"[green]✓ Join request sent to club #{club_id}[/green]")
    if status.status:
        console.print(f"[dim]Membership status: {status.status}[/dim]")


@clubs.command('members')
@click.argument('club_id', type=int)
@click.pass_context
def clubs_members(ctx, club_id):
    """List the approved members of a club"""
    client = _client(ctx)
    with api_errors():
        members = client.get_club_members(club_id)

    if not members:
        console.print("[yellow]No members yet[/yellow]")
        return
    console.print(_members_table(members, f"Members of club #{club_id}"))


@clubs.command('pending')
@click.argument('club_id', type=int)
@click.pass_context
def clubs_pending(ctx, club_id):
    """List join requests waiting for a decision (club admins)"""
    client = _client(ctx)
    with api_errors():
        pending = client.get_pending_memberships(club_id)

    if not pending:
        console.print("[green]No pending requests[/green]")
        return
    console.print(_members_table(pending, f"Pending requests for club #{club_id}"))
    console.print("[dim]unisocial clubs approve-member MEMBERSHIP_ID[/dim]")


@clubs.command('approve-member')
@click.argument('membership_id', type=int)
@click.pass_context
def clubs_approve_member(ctx, membership_id):
    """Approve a join request"""
    client = _client(ctx)
    with api_errors():
        client.approve_membership(membership_id)
    console.print(f"[green]✓ Membership #{membership_id} approved[/green]")


@clubs.command('reject-member')
@click.argument('membership_id', type=int)
@click.pass_context
def clubs_reject_member(ctx, membership_id):
    """Reject a join request"""
    client = _client(ctx)
    with api_errors():
        client.reject_membership(membership_id)
    console.print(f"[green]✓ Membership #{membership_id} rejected[/green]")


@clubs.command('promote')
@click.argument('membership_id', type=int)
@click.option('--demote', is_flag=True, help='Turn a club admin back into a member')
@click.pass_context
def clubs_promote(ctx, membership_id, demote):
    """Make a member a club admin (or demote one)"""
    client = _client(ctx)
    with api_errors():
        if demote:
            client.demote_member(membership_id)
        else:
            client.promote_member(membership_id)
    verb = "demoted" if demote else "promoted"
    console.print(f"[green]✓ Membership #{membership_id} {verb}[/green]")


@clubs.command('remove-member')
@click.argument('club_id', type=int)
@click.argument('user_id', type=int)
@click.pass_context
def clubs_remove_member(ctx, club_id, user_id):
    """Remove a user from a club"""
    client = _client(ctx)
    with api_errors():
        client.remove_member(club_id, user_id)
    console.print(f"[green]✓ User #{user_id} removed from club #{club_id}[/green]")


@clubs.command('analytics')
@click.argument('club_id', type=int)
@click.pass_context
def clubs_analytics(ctx, club_id):
    """Show a club's numbers (club admins and platform admins)"""
    client = _client(ctx)
    with api_errors():
        analytics = client.get_club_analytics(club_id)

    table = Table(title=f"Analytics: {analytics.club_name or club_id}", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Members", str(analytics.member_count))
    table.add_row("Posts", str(analytics.post_count))
    table.add_row("Events", str(analytics.event_count))
    table.add_row("Engagement score", f"{analytics.engagement_score:.2f}")
    console.print(table)


# Events


@cli.group(invoke_without_command=True)
@click.option('--upcoming', is_flag=True, help='Only upcoming events')
@click.option('--recommended', is_flag=True, help='Events picked for you')
@click.option('--club', 'club_id', type=int, help='Only events of this club')
@click.option('--year', type=int, help='Calendar year (with --month)')
@click.option('--month', type=click.IntRange(1, 12), help='Calendar month (with --year)')
@click.pass_context
def events(ctx, upcoming, recommended, club_id, year, month):
    """Show the events calendar, or manage events with a subcommand"""
    if ctx.invoked_subcommand is not None:
        return
    if (year is None) != (month is None):
        raise click.UsageError("--year and --month must be given together")

    client = _client(ctx)
    with api_errors():
        if upcoming:
            event_list = client.get_upcoming_events()
        elif recommended:
            event_list = client.get_recommended_events()
        elif club_id:
            event_list = client.get_club_events(club_id)
        else:
            event_list = client.get_events(year=year, month=month)

    if not event_list:
        console.print("[yellow]No events found[/yellow]")
        return

    console.print(_events_table(event_list, "Events"))


@events.command('show')
@click.argument('event_id', type=int)
@click.pass_context
def events_show(ctx, event_id):
    """Show the details of an event"""
    client = _client(ctx)
    with api_errors():
        event = client.get_event(event_id)

    starts = event.start_time.strftime("%Y-%m-%d %H:%M") if event.start_time else "-"
    ends = event.end_time.strftime("%Y-%m-%d %H:%M") if event.end_time else "-"
    console.print(Panel.fit(
        f"[bold blue]{event.title}[/bold blue] (#{event.id}) by {event.club_name or '-'}\n"
        f"{event.description or ''}\n"
        f"When: {starts} to {ends}\n"
        f"Where: {event.location or '-'}\n"
        f"OD provided: {'yes' if event.od_provided else 'no'}\n"
        f"Register: {event.registration_link or '-'}",
        border_style="blue"
    ))


@events.command('create')
@click.argument('club_id', type=int)
@click.option('--title', required=True, help='Event title')
@click.option('--description', required=True, help='Event description')
@click.option('--location', required=True, help='Venue')
@click.option('--start', 'start_time', required=True, type=click.DateTime(), help='Start time (YYYY-MM-DD HH:MM:SS)')
@click.option('--end', 'end_time', required=True, type=click.DateTime(), help='End time (YYYY-MM-DD HH:MM:SS)')
@click.option('--registration-link', help='Where to register')
@click.option('--od', 'od_provided', is_flag=True, help='On-duty leave is provided')
@click.pass_context
def events_create(ctx, club_id, title, description, location, start_time, end_time, registration_link, od_provided):
    """Create an event for a club (club admins)"""
    if end_time < start_time:
        raise click.UsageError("--end must not be before --start")

    request = CreateEventRequest(
        title=title,
        description=description,
        location=location,
        start_time=start_time.astimezone(),
        end_time=end_time.astimezone(),
        registration_link=registration_link,
        od_provided=od_provided,
    )
    client = _client(ctx)
    with api_errors():
        event = client.create_event(club_id, request)
    console.print(f"[green]✓ Event #{event.id} created[/green]")


@events.command('update')
@click.argument('event_id', type=int)
@click.option('--title', help='Event title')
@click.option('--description', help='Event description')
@click.option('--location', help='Venue')
@click.option('--start', 'start_time', type=click.DateTime(), help='Start time')
@click.option('--end', 'end_time', type=click.DateTime(), help='End time')
@click.option('--registration-link', help='Where to register')
@click.option('--od/--no-od', 'od_provided', default=None, help='On-duty leave is provided')
@click.pass_context
def events_update(ctx, event_id, **changes):
    """Change some details of an event"""
    # Times typed at the prompt are local
    for key in ("start_time", "end_time"):
        if changes[key] is not None:
            changes[key] = changes[key].astimezone()
    update = EventUpdate(**changes)
    if not update.to_payload():
        raise click.UsageError("Nothing to update")

    client = _client(ctx)
    with api_errors():
        event = client.update_event(event_id, update)
    console.print(f"[green]✓ Event #{event.id} updated[/green]")


@events.command('delete')
@click.argument('event_id', type=int)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def events_delete(ctx, event_id, yes):
    """Delete an event"""
    if not yes:
        click.confirm(f"Delete event #{event_id}?", abort=True)
    client = _client(ctx)
    with api_errors():
        client.delete_event(event_id)
    console.print(f"[green]✓ Event #{event_id} deleted[/green]")


# Admin


@cli.group()
def admin():
    """Moderation and analytics (admin accounts only)"""
    pass


@admin.command('stats')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json']), default='table', help='Output format')
@click.pass_context
def admin_stats(ctx, output_format):
    """Show platform analytics"""
    client = _client(ctx)
    with api_errors():
        analytics = client.get_admin_analytics()

    if output_format == 'json':
        click.echo(json.dumps(analytics.model_dump(by_alias=True), indent=2))
        return

    table = Table(title="Platform Analytics", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Users", str(analytics.total_users))
    table.add_row("Active users", str(analytics.active_users))
    table.add_row("Clubs", f"{analytics.total_clubs} ({analytics.verified_clubs} verified)")
    table.add_row("Posts", str(analytics.total_posts))
    table.add_row("Comments", str(analytics.total_comments))
    table.add_row("Likes", str(analytics.total_likes))
    table.add_row("Events", str(analytics.total_events))
    console.print(table)


@admin.command('clubs')
@click.pass_context
def admin_clubs(ctx):
    """List every club, verified or not"""
    client = _client(ctx)
    with api_errors():
        club_list = client.get_all_clubs()

    if not club_list:
        console.print("[yellow]No clubs found[/yellow]")
        return
    console.print(_clubs_table(club_list, "All clubs"))


@admin.command('approve-club')
@click.argument('club_id', type=int)
@click.option('--reject', is_flag=True, help='Reject instead of approve')
@click.pass_context
def admin_approve_club(ctx, club_id, reject):
    """Approve (or reject) a pending club"""
    client = _client(ctx)
    with api_errors():
        if reject:
            client.reject_club(club_id)
        else:
            client.approve_club(club_id)
    console.print(f"[green]✓ Club #{club_id} {'rejected' if reject else 'approved'}[/green]")


@admin.command('verify-club')
@click.argument('club_id', type=int)
@click.pass_context
def admin_verify_club(ctx, club_id):
    """Mark a club as verified"""
    client = _client(ctx)
    with api_errors():
        client.verify_club(club_id)
    console.print(f"[green]✓ Club #{club_id} verified[/green]")


@admin.command('users')
@click.pass_context
def admin_users(ctx):
    """List every registered user"""
    client = _client(ctx)
    with api_errors():
        all_users = client.get_all_users()

    table = Table(title=f"Users ({len(all_users)})", show_header=True, header_style="bold cyan")
    table.add_column("User", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column("Joined")
    for user in all_users:
        table.add_row(
            str(user.id),
            user.name or "-",
            user.email or "-",
            user.role.value,
            user.created_at.strftime("%Y-%m-%d") if user.created_at else "-",
        )
    console.print(table)


@admin.command('delete-user')
@click.argument('user_id', type=int)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def admin_delete_user(ctx, user_id, yes):
    """Delete a user account"""
    if not yes:
        click.confirm(f"Delete user #{user_id} and everything they posted?", abort=True)
    client = _client(ctx)
    with api_errors():
        client.delete_user(user_id)
    console.print(f"[green]✓ User #{user_id} deleted[/green]")


@admin.command('trends')
@click.option('--start', 'start_date', type=click.DateTime(formats=["%Y-%m-%d"]), help='First day (YYYY-MM-DD)')
@click.option('--end', 'end_date', type=click.DateTime(formats=["%Y-%m-%d"]), help='Last day (YYYY-MM-DD)')
@click.pass_context
def admin_trends(ctx, start_date, end_date):
    """Show daily user registrations"""
    client = _client(ctx)
    with api_errors():
        trends = client.get_user_trends(
            start_date=start_date.date() if start_date else None,
            end_date=end_date.date() if end_date else None,
        )

    table = Table(title="User registrations", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="cyan")
    table.add_column("New users", justify="right")
    for trend in trends:
        table.add_row(trend.date.isoformat(), str(trend.count))
    table.add_row("[bold]Total[/bold]", str(sum(t.count for t in trends)))
    console.print(table)


@admin.command('trending')
@click.option('--limit', type=click.IntRange(1, 100), default=10, help='Number of posts (default: 10)')
@click.pass_context
def admin_trending(ctx, limit):
    """Show the posts with the most likes and comments"""
    client = _client(ctx)
    with api_errors():
        trending = client.get_trending_posts(limit=limit)

    table = Table(title="Trending posts", show_header=True, header_style="bold cyan")
    table.add_column("Post", justify="right", style="cyan")
    table.add_column("Author")
    table.add_column("Text", overflow="fold")
    table.add_column("Likes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Engagement", justify="right")
    for item in trending:
        table.add_row(
            str(item.post_id),
            item.author_name or "-",
            item.content_text,
            str(item.like_count),
            str(item.comment_count),
            str(item.total_engagement),
        )
    console.print(table)


if __name__ == "__main__":
    cli()
